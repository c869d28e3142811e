"""
Render variants.

Each public function here is one complete render: it allocates its own
frame and depth buffers, rasterizes every face of a mesh (or a fixed demo
triangle), writes exactly one image and returns the frame buffer.

Screen mapping, projection and lighting live here; the per-pixel work is
done by FrameBuffer.
"""
import logging
from pathlib import Path
from typing import Callable, Optional, Tuple, Union

import numpy as np

from tinyrender.framebuffer import BLACK, BLUE, YELLOW, Color, DepthBuffer, FrameBuffer
from tinyrender.geometry import Point3D, Triangle
from tinyrender.matrix import (
    Matrix4, image_position, model_view, perspective_factor, projection, rotate_y, scale, translate,
    viewport,
)
from tinyrender.mesh import Mesh, load_obj
from tinyrender.texture import Texture, load_texture

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
# vertex transform; None means the vertex cannot be projected
ScreenMap = Callable[[Point3D], Optional[Point3D]]

DEFAULT_LIGHT = Point3D(0.0, 0.0, -1.0)
W_EPS = 1e-9


# ============================================================
#  Helpers
# ============================================================

def new_buffers(width: int, height: int, background: Color = BLACK) -> Tuple[FrameBuffer, DepthBuffer]:
    fb = FrameBuffer(width, height, background)
    return fb, fb.new_depth_buffer()


def screen_mapper(width: int, height: int) -> ScreenMap:
    """[-1,1] on every axis to [0,width] x [0,height] x [0,width]."""
    def to_screen(p: Point3D) -> Point3D:
        return Point3D(image_position(p.x, width),
                       image_position(p.y, height),
                       image_position(p.z, width))
    return to_screen


def matrix_mapper(m: Matrix4) -> ScreenMap:
    """Full homogeneous transform followed by the divide by w."""
    def to_screen(p: Point3D) -> Optional[Point3D]:
        x, y, z, w = m.mul_point(p)
        if abs(w) < W_EPS:
            return None
        return Point3D(x / w, y / w, z / w)
    return to_screen


def face_intensity(world: Triangle, light_dir: Point3D) -> float:
    """Flat Lambert term: unit face normal dotted with the light direction."""
    return world.normal().dot(light_dir)


def _texture_coords(mesh: Mesh, face: Tuple[int, int, int], texture: Texture):
    coords = []
    for v in face:
        u, t = mesh.texcoord(v)
        coords.append(Point3D(u * texture.width, t * texture.height, 0.0))
    return coords


# ============================================================
#  Shared textured loop
# ============================================================

def render_textured(mesh: Mesh,
                    texture: Texture,
                    fb: FrameBuffer,
                    depth: DepthBuffer,
                    to_screen: ScreenMap,
                    light_dir: Point3D = DEFAULT_LIGHT,
                    to_world: Optional[Callable[[Point3D], Point3D]] = None) -> int:
    """
    Draw every lit face of the mesh with texture and flat lighting.

    to_screen maps object-space vertices to screen space; to_world (optional)
    maps them to the space the normal is computed in. Faces facing away from
    the light (intensity <= 0) or that cannot be projected are skipped.

    Returns the number of faces drawn.
    """
    if not mesh.has_texcoords:
        logger.warning("Mesh has no texture coordinates; every face samples texel (0, 0)")

    drawn = 0
    for f, face in enumerate(mesh.faces()):
        world = [mesh.position(v) for v in face]
        if to_world is not None:
            world = [to_world(p) for p in world]

        screen = [to_screen(p) for p in world]
        if any(p is None for p in screen):
            logger.debug("Face %d projects through w=0, skipped", f)
            continue

        intensity = face_intensity(Triangle.from_points(world), light_dir)
        if intensity <= 0.0:
            continue

        fb.draw_triangle_with_texture(Triangle.from_points(screen),
                                      _texture_coords(mesh, face, texture),
                                      texture, intensity, depth)
        drawn += 1
    logger.info("Drew %d of %d faces", drawn, mesh.n_faces)
    return drawn


def render_pipeline(mesh: Mesh,
                    texture: Texture,
                    fb: FrameBuffer,
                    depth: DepthBuffer,
                    pipeline: Matrix4,
                    light_dir: Point3D = DEFAULT_LIGHT,
                    model: Optional[Matrix4] = None) -> int:
    """
    render_textured with a composed matrix pipeline.

    With a model matrix the vertices are first moved into world space; the
    pipeline (viewport x projection x model-view) then maps world space to
    the screen.
    """
    to_world = None
    if model is not None:
        def to_world(p: Point3D) -> Point3D:
            x, y, z, _ = model.mul_point(p)
            return Point3D(x, y, z)
    return render_textured(mesh, texture, fb, depth, matrix_mapper(pipeline), light_dir, to_world)


# ============================================================
#  Variants
# ============================================================

def draw_triangle_demo(output_path: PathLike, width: int = 500, height: int = 500) -> FrameBuffer:
    """A single flat-filled triangle with its bounding box outlined."""
    fb = FrameBuffer(width, height)
    triangle = Triangle(Point3D(420.0, 280.0, 0.0),
                        Point3D(120.0, 200.0, 0.0),
                        Point3D(20.0, 20.0, 0.0))
    fb.draw_triangle_old(triangle, BLUE)
    fb.draw_bbox(triangle, YELLOW)
    fb.save(output_path)
    return fb


def flat_shading_render(mesh_path: PathLike,
                        output_path: PathLike,
                        width: int,
                        height: int,
                        seed: Optional[int] = 0) -> FrameBuffer:
    """
    Every face in a random color, depth-tested.

    All faces sit at z = 0, so the first face to reach a pixel keeps it.
    """
    mesh = load_obj(mesh_path)
    fb, depth = new_buffers(width, height)
    rng = np.random.default_rng(seed)
    to_screen = screen_mapper(width, height)

    for face in mesh.faces():
        screen = [to_screen(mesh.position(v)) for v in face]
        triangle = Triangle.from_points([Point3D(p.x, p.y, 0.0) for p in screen])
        r, g, b = (int(c) for c in rng.integers(0, 256, size=3))
        fb.draw_triangle(triangle, depth, (r, g, b))

    fb.save(output_path)
    return fb


def flat_shading_illumination(mesh_path: PathLike,
                              output_path: PathLike,
                              width: int,
                              height: int,
                              light_dir: Point3D = DEFAULT_LIGHT) -> FrameBuffer:
    """Gray level per face from the flat light intensity, depth-tested."""
    mesh = load_obj(mesh_path)
    fb, depth = new_buffers(width, height)
    to_screen = screen_mapper(width, height)

    drawn = 0
    for face in mesh.faces():
        world = [mesh.position(v) for v in face]
        level = int(min(max(face_intensity(Triangle.from_points(world), light_dir) * 255.0, 0.0), 255.0))
        if level <= 0:
            continue
        screen = Triangle.from_points([to_screen(p) for p in world])
        fb.draw_triangle(screen, depth, (level, level, level))
        drawn += 1

    logger.info("Drew %d of %d faces", drawn, mesh.n_faces)
    fb.save(output_path)
    return fb


def render_with_texture(mesh_path: PathLike,
                        texture_path: PathLike,
                        output_path: PathLike,
                        width: int,
                        height: int,
                        light_dir: Point3D = DEFAULT_LIGHT) -> FrameBuffer:
    """Textured flat shading, vertices mapped straight from [-1,1] to the screen."""
    mesh = load_obj(mesh_path)
    texture = load_texture(texture_path)
    fb, depth = new_buffers(width, height)
    render_textured(mesh, texture, fb, depth, screen_mapper(width, height), light_dir)
    fb.save(output_path)
    return fb


def render_with_projection(mesh_path: PathLike,
                           texture_path: PathLike,
                           output_path: PathLike,
                           width: int,
                           height: int,
                           light_dir: Point3D = DEFAULT_LIGHT,
                           camera_z: float = 5.0) -> FrameBuffer:
    """
    Textured render with a per-vertex perspective factor.

    Each vertex is scaled in x and y by (c-1)/(c-z) before the screen
    mapping, c being the camera distance.
    """
    mesh = load_obj(mesh_path)
    texture = load_texture(texture_path)
    fb, depth = new_buffers(width, height)
    to_screen = screen_mapper(width, height)

    def project(p: Point3D) -> Optional[Point3D]:
        if abs(camera_z - p.z) < W_EPS:
            return None
        return to_screen(perspective_factor(camera_z, p.z).mul_point(p))

    render_textured(mesh, texture, fb, depth, project, light_dir)
    fb.save(output_path)
    return fb


def render_ortho(mesh_path: PathLike,
                 texture_path: PathLike,
                 output_path: PathLike,
                 width: int,
                 height: int,
                 light_dir: Point3D = DEFAULT_LIGHT,
                 camera_z: float = 3.0) -> FrameBuffer:
    """Textured render through viewport x projection(camera_z)."""
    mesh = load_obj(mesh_path)
    texture = load_texture(texture_path)
    fb, depth = new_buffers(width, height)
    pipeline = viewport(width, height, width).matmul(projection(camera_z))
    render_pipeline(mesh, texture, fb, depth, pipeline, light_dir)
    fb.save(output_path)
    return fb


def render_with_camera(mesh_path: PathLike,
                       texture_path: PathLike,
                       output_path: PathLike,
                       width: int,
                       height: int,
                       eye: Point3D = Point3D(-2.0, 1.0, 3.0),
                       up: Point3D = Point3D(0.0, 1.0, 0.0),
                       camera_z: float = 3.0,
                       depth_range: float = 255.0,
                       light_dir: Point3D = DEFAULT_LIGHT,
                       model_yaw: float = 0.0,
                       model_scale: float = 1.0,
                       model_offset: Point3D = Point3D(0.0, 0.0, 0.0)) -> FrameBuffer:
    """
    Textured render seen from an arbitrary eye position.

      pipeline = viewport(w, h, d) x projection(c) x model_view(up, eye)

    model_yaw, model_scale and model_offset place the mesh in world space
    first (scale, then rotate, then translate); lighting uses the
    world-space face normal.
    """
    mesh = load_obj(mesh_path)
    texture = load_texture(texture_path)
    fb, depth = new_buffers(width, height)

    pipeline = (viewport(width, height, depth_range)
                .matmul(projection(camera_z))
                .matmul(model_view(up, eye)))
    model = None
    if model_yaw != 0.0 or model_scale != 1.0 or model_offset != Point3D.zero():
        model = (translate(model_offset.x, model_offset.y, model_offset.z)
                 .matmul(rotate_y(model_yaw))
                 .matmul(scale(model_scale, model_scale, model_scale)))

    render_pipeline(mesh, texture, fb, depth, pipeline, light_dir, model)
    fb.save(output_path)
    return fb
