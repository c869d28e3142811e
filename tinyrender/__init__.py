"""Software rasterizer: triangle meshes to a depth-tested, textured image."""
from tinyrender.framebuffer import BufferMismatchError, DepthBuffer, FrameBuffer
from tinyrender.geometry import Point, Point3D, Triangle
from tinyrender.matrix import Matrix3, Matrix4
from tinyrender.mesh import Mesh, MeshError, load_obj
from tinyrender.texture import Texture, load_texture

__version__ = "0.1.0"

__all__ = [
    "BufferMismatchError",
    "DepthBuffer",
    "FrameBuffer",
    "Matrix3",
    "Matrix4",
    "Mesh",
    "MeshError",
    "Point",
    "Point3D",
    "Texture",
    "Triangle",
    "load_obj",
    "load_texture",
]
