"""
Render configuration.

Central place for the defaults the render variants and the CLI share:
image size, light and camera.
"""
from dataclasses import dataclass, replace

from tinyrender.geometry import Point3D


@dataclass(frozen=True)
class RenderConfig:
    width: int = 500
    height: int = 500
    # depth range of the viewport cube, [0, depth]
    depth: float = 255.0
    light_dir: Point3D = Point3D(0.0, 0.0, -1.0)
    # distance of the camera from the origin along +z
    camera_z: float = 3.0
    eye: Point3D = Point3D(-2.0, 1.0, 3.0)
    up: Point3D = Point3D(0.0, 1.0, 0.0)
    model_yaw: float = 0.0          # radians
    model_scale: float = 1.0
    model_offset: Point3D = Point3D(0.0, 0.0, 0.0)
    seed: int = 0

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"image size must be positive, got {self.width}x{self.height}")
        if self.camera_z == 0:
            raise ValueError("camera_z must be non-zero")

    def with_overrides(self, **kwargs) -> "RenderConfig":
        """Copy with every non-None keyword applied."""
        return replace(self, **{k: v for k, v in kwargs.items() if v is not None})
