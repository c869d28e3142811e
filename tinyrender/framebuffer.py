"""
Frame buffer and depth buffer.

The frame buffer owns the pixels of one rendered frame. Callers address it
with float coordinates in the positive quadrant, origin in the bottom-left
corner; internally row 0 is the top of the image, so

    row = clamp(height - y)    col = clamp(x)

with both clamps saturating to [0, dimension - 1].

The depth buffer is a separate object owned by the same render call and
passed explicitly into every depth-tested draw.
"""
import logging
from pathlib import Path
from typing import Sequence, Tuple, Union

import numpy as np
from PIL import Image

from tinyrender import raster
from tinyrender.geometry import Point3D, Triangle
from tinyrender.texture import Texture

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]

BLACK: Color = (0, 0, 0)
WHITE: Color = (255, 255, 255)
RED: Color = (255, 0, 0)
GREEN: Color = (0, 255, 0)
BLUE: Color = (0, 0, 255)
YELLOW: Color = (255, 255, 0)


class BufferMismatchError(ValueError):
    """Depth buffer and frame buffer do not describe the same pixel grid."""


def _check_size(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise ValueError(f"buffer size must be positive, got {width}x{height}")


class DepthBuffer:
    """
    Per-pixel depth, one float32 per frame buffer pixel.

    Starts at the lowest float32 ("nothing drawn yet"); a draw call wins a
    pixel when its depth is strictly greater than the stored value.
    """
    EMPTY = float(np.finfo(np.float32).min)

    def __init__(self, width: int, height: int):
        _check_size(width, height)
        self.width = width
        self.height = height
        self.values = np.full(width * height, self.EMPTY, dtype=np.float32)

    def __len__(self):
        return self.values.shape[0]

    def reset(self) -> None:
        self.values.fill(self.EMPTY)

    def as_image(self) -> np.ndarray:
        """Depth values as (height, width), row 0 at the top."""
        return self.values.reshape(self.height, self.width)


class FrameBuffer:
    """
    RGB pixel buffer for a single frame.

    pixels: uint8 array of shape (width*height, 3), row-major from the top.
    """

    def __init__(self, width: int, height: int, background: Color = BLACK):
        _check_size(width, height)
        self.width = width
        self.height = height
        self.pixels = np.empty((width * height, 3), dtype=np.uint8)
        self.pixels[:] = background

    def new_depth_buffer(self) -> DepthBuffer:
        return DepthBuffer(self.width, self.height)

    def _check_depth(self, depth: DepthBuffer) -> None:
        if (depth.width, depth.height) != (self.width, self.height):
            raise BufferMismatchError(
                f"depth buffer is {depth.width}x{depth.height}, "
                f"frame buffer is {self.width}x{self.height}")

    # ------------------------------------------------------------
    #  Coordinate mapping
    # ------------------------------------------------------------

    def row_for(self, y: float) -> int:
        return raster.clamp_index(float(self.height - y), self.height)

    def col_for(self, x: float) -> int:
        return raster.clamp_index(float(x), self.width)

    def row_to_y(self, row: int) -> float:
        """Inverse of row_for for rows inside the buffer."""
        return float(self.height - row)

    def index(self, x: float, y: float) -> int:
        """Flat pixel index of the logical point (x, y)."""
        return raster.pixel_index(float(x), float(y), self.width, self.height)

    def set_pixel(self, x: float, y: float, color: Color) -> None:
        self.pixels[self.index(x, y)] = color

    def get_pixel(self, x: float, y: float) -> Color:
        r, g, b = self.pixels[self.index(x, y)]
        return int(r), int(g), int(b)

    # ------------------------------------------------------------
    #  Lines
    # ------------------------------------------------------------

    def draw_lines_segment(self, x0: float, y0: float, x1: float, y1: float, color: Color) -> None:
        """
        Draw a segment by stepping the longer axis one unit at a time.

        The four endpoint orderings (steep or shallow, increasing or
        decreasing) are folded into a single left-to-right walk.
        """
        steep = abs(y1 - y0) > abs(x1 - x0)
        if steep:
            # walk along y
            if y0 > y1:
                a0, b0, a1, b1 = y1, x1, y0, x0
            else:
                a0, b0, a1, b1 = y0, x0, y1, x1
        else:
            if x0 > x1:
                a0, b0, a1, b1 = x1, y1, x0, y0
            else:
                a0, b0, a1, b1 = x0, y0, x1, y1
        r, g, b = color
        raster.line_walk(self.pixels, self.width, self.height,
                         float(a0), float(b0), float(a1), float(b1), steep, r, g, b)

    def draw_bbox(self, triangle: Triangle, color: Color) -> None:
        """Outline the triangle's pixel bounding box."""
        sw, ne = triangle.compute_bbox()
        self.draw_lines_segment(sw.x, sw.y, ne.x, sw.y, color)
        self.draw_lines_segment(sw.x, ne.y, ne.x, ne.y, color)
        self.draw_lines_segment(sw.x, sw.y, sw.x, ne.y, color)
        self.draw_lines_segment(ne.x, sw.y, ne.x, ne.y, color)

    # ------------------------------------------------------------
    #  Triangles
    # ------------------------------------------------------------

    def draw_triangle_old(self, triangle: Triangle, color: Color) -> int:
        """Flat fill without depth test. Returns the number of pixel writes."""
        if triangle.is_degenerate():
            logger.debug("Skipping zero-area triangle %s", triangle)
            return 0
        sw, ne = triangle.compute_bbox()
        r, g, b = color
        x0, y0, _, x1, y1, _, x2, y2, _ = triangle.coords()
        return raster.fill_flat(self.pixels, self.width, self.height,
                                x0, y0, x1, y1, x2, y2,
                                float(sw.x), float(sw.y), float(ne.x), float(ne.y),
                                r, g, b)

    def draw_triangle(self, triangle: Triangle, depth: DepthBuffer, color: Color) -> int:
        """
        Depth-tested flat fill.

        The barycentric blend of the vertex z values must be strictly
        greater than the stored depth for a pixel to be written.
        Returns the number of pixels won.
        """
        self._check_depth(depth)
        if triangle.is_degenerate():
            logger.debug("Skipping zero-area triangle %s", triangle)
            return 0
        sw, ne = triangle.compute_bbox()
        r, g, b = color
        return raster.fill_depth(self.pixels, depth.values, self.width, self.height,
                                 *triangle.coords(),
                                 float(sw.x), float(sw.y), float(ne.x), float(ne.y),
                                 r, g, b)

    def draw_triangle_with_texture(self,
                                   triangle: Triangle,
                                   texture_coords: Sequence[Point3D],
                                   texture: Texture,
                                   intensity: float,
                                   depth: DepthBuffer) -> int:
        """
        Depth-tested fill sampling a texture, scaled by a flat intensity.

        texture_coords are per-vertex (u, v) in texel units (z unused).
        Returns the number of pixels won.
        """
        self._check_depth(depth)
        if triangle.is_degenerate():
            logger.debug("Skipping zero-area triangle %s", triangle)
            return 0
        sw, ne = triangle.compute_bbox()
        t0, t1, t2 = texture_coords
        x0, y0, z0, x1, y1, z1, x2, y2, z2 = triangle.coords()
        return raster.fill_textured(self.pixels, depth.values, self.width, self.height,
                                    texture.texels,
                                    x0, y0, z0, float(t0.x), float(t0.y),
                                    x1, y1, z1, float(t1.x), float(t1.y),
                                    x2, y2, z2, float(t2.x), float(t2.y),
                                    float(sw.x), float(sw.y), float(ne.x), float(ne.y),
                                    float(intensity))

    def draw_triangles_line_sweep(self, triangle: Triangle, color: Color) -> None:
        """
        Scanline fill: horizontal spans between the long edge (lowest to
        highest vertex) and the two short edges, one row per unit of y.
        """
        if triangle.is_degenerate():
            logger.debug("Skipping zero-area triangle %s", triangle)
            return
        p0, p1, p2 = triangle.sorted_by_y().vertices
        self._sweep_half(p0, p1, p0, p2, color)
        self._sweep_half(p1, p2, p0, p2, color)

    def _sweep_half(self, a: Point3D, b: Point3D, lo: Point3D, hi: Point3D, color: Color) -> None:
        if b.y == a.y:
            self.draw_lines_segment(a.x, a.y, b.x, b.y, color)
            return
        y = a.y
        while y <= b.y:
            xa = a.x + (b.x - a.x) * (y - a.y) / (b.y - a.y)
            xb = lo.x + (hi.x - lo.x) * (y - lo.y) / (hi.y - lo.y)
            self.draw_lines_segment(xa, y, xb, y, color)
            y += 1.0

    # ------------------------------------------------------------
    #  Export
    # ------------------------------------------------------------

    def as_array(self) -> np.ndarray:
        """Pixels as (height, width, 3), row 0 at the top."""
        return self.pixels.reshape(self.height, self.width, 3)

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.as_array())

    def save(self, path: Union[str, Path]) -> Path:
        """Write the frame; the format follows the file extension."""
        path = Path(path)
        self.to_image().save(path)
        logger.info("image written to %s", path)
        return path
