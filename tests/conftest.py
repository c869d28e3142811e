import logging

import numpy as np
import pytest
from PIL import Image

from tinyrender.logging_config import PACKAGE_LOGGER

# Unit square in the z = 0 plane, wound counter-clockwise seen from +z,
# so its face normal is (0, 0, -1) and the default light hits it head on.
QUAD_OBJ = """\
# unit quad
v -0.5 -0.5 0.0
v 0.5 -0.5 0.0
v 0.5 0.5 0.0
v -0.5 0.5 0.0
vt 0.0 0.0
vt 1.0 0.0
vt 1.0 1.0
vt 0.0 1.0
f 1/1 2/2 3/3 4/4
"""

# Same quad wound the other way: faces away from the light.
BACKFACING_QUAD_OBJ = """\
v -0.5 -0.5 0.0
v 0.5 -0.5 0.0
v 0.5 0.5 0.0
v -0.5 0.5 0.0
vt 0.0 0.0
vt 1.0 0.0
vt 1.0 1.0
vt 0.0 1.0
f 4/4 3/3 2/2 1/1
"""

TEXTURE_COLOR = (200, 100, 50)


@pytest.fixture
def quad_obj(tmp_path):
    path = tmp_path / "quad.obj"
    path.write_text(QUAD_OBJ)
    return path


@pytest.fixture
def backfacing_obj(tmp_path):
    path = tmp_path / "back.obj"
    path.write_text(BACKFACING_QUAD_OBJ)
    return path


@pytest.fixture
def solid_texture_png(tmp_path):
    path = tmp_path / "solid.png"
    texels = np.zeros((4, 4, 3), dtype=np.uint8)
    texels[:] = TEXTURE_COLOR
    Image.fromarray(texels).save(path)
    return path


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
