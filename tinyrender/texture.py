import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)


@dataclass
class Texture:
    """
    RGB texture image.

    texels has shape (height, width, 3), dtype uint8, row 0 at the top.
    """
    texels: np.ndarray

    def __post_init__(self):
        if self.texels.ndim != 3 or self.texels.shape[2] != 3:
            raise ValueError(f"texture must be HxWx3, got shape {self.texels.shape}")
        self.texels = np.ascontiguousarray(self.texels, dtype=np.uint8)

    @property
    def width(self) -> int:
        return self.texels.shape[1]

    @property
    def height(self) -> int:
        return self.texels.shape[0]

    @classmethod
    def from_image(cls, image: Image.Image) -> "Texture":
        return cls(np.array(image.convert("RGB"), dtype=np.uint8))


def load_texture(path: Union[str, Path]) -> Texture:
    """Read any image Pillow understands; OSError propagates on failure."""
    with Image.open(path) as image:
        texture = Texture.from_image(image)
    logger.info("Loaded texture %s (%dx%d)", path, texture.width, texture.height)
    return texture
