"""
Command-line entry point.

usage:
    tinyrender triangle -o triangle.tga
    tinyrender flat african_head.obj -o flat.tga --seed 7
    tinyrender illumination african_head.obj
    tinyrender texture african_head.obj --texture diffuse.tga
    tinyrender projection african_head.obj --texture diffuse.tga
    tinyrender ortho african_head.obj --texture diffuse.tga --camera-z 3
    tinyrender camera african_head.obj --texture diffuse.tga --eye -2 1 3
"""
import argparse
import logging
import math
import sys

from tinyrender import pipeline
from tinyrender.config import RenderConfig
from tinyrender.geometry import Point3D
from tinyrender.logging_config import setup_logging

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = {
    "triangle": "triangles.tga",
    "flat": "flat_shading.tga",
    "illumination": "flat_shading_illumination.tga",
    "texture": "with_texture.tga",
    "projection": "with_texture_projection.tga",
    "ortho": "with_texture_ortho.tga",
    "camera": "camera_move.tga",
}


def _vec3(values):
    return Point3D.from_seq(values) if values is not None else None


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('-o', '--output', help='Output image path (format from extension)')
    common.add_argument('--width', type=int, help='Image width in pixels')
    common.add_argument('--height', type=int, help='Image height in pixels')
    common.add_argument('--log-level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], help='Logging level')
    common.add_argument('--log-file', help='Also write the log to this file')
    common.add_argument('--preview', action='store_true', help='Show the result in a pygame window')

    mesh_opts = argparse.ArgumentParser(add_help=False)
    mesh_opts.add_argument('mesh', help='Wavefront OBJ file')
    mesh_opts.add_argument('--light', type=float, nargs=3, metavar=('X', 'Y', 'Z'),
                           help='Light direction (default 0 0 -1)')

    tex_opts = argparse.ArgumentParser(add_help=False)
    tex_opts.add_argument('--texture', required=True, help='Diffuse texture image')

    parser = argparse.ArgumentParser(prog='tinyrender',
                                     description='Software rasterizer: render an OBJ mesh to an image file')
    sub = parser.add_subparsers(dest='command', required=True)

    sub.add_parser('triangle', parents=[common], help='Single flat triangle with its bounding box')

    p = sub.add_parser('flat', parents=[common, mesh_opts], help='Random color per face, depth-tested')
    p.add_argument('--seed', type=int, help='Random seed for the face colors')

    sub.add_parser('illumination', parents=[common, mesh_opts], help='Flat gray shading from a light direction')
    sub.add_parser('texture', parents=[common, mesh_opts, tex_opts], help='Textured flat shading')

    p = sub.add_parser('projection', parents=[common, mesh_opts, tex_opts],
                       help='Textured, per-vertex perspective factor')
    p.add_argument('--camera-z', type=float, default=5.0, help='Camera distance (default 5)')

    p = sub.add_parser('ortho', parents=[common, mesh_opts, tex_opts],
                       help='Textured, viewport x projection pipeline')
    p.add_argument('--camera-z', type=float, help='Camera distance on the z axis')

    p = sub.add_parser('camera', parents=[common, mesh_opts, tex_opts],
                       help='Textured, viewport x projection x model-view pipeline')
    p.add_argument('--camera-z', type=float, help='Camera distance on the z axis')
    p.add_argument('--eye', type=float, nargs=3, metavar=('X', 'Y', 'Z'), help='Eye position')
    p.add_argument('--up', type=float, nargs=3, metavar=('X', 'Y', 'Z'), help='Up vector')
    p.add_argument('--depth', type=float, help='Depth range of the viewport')
    p.add_argument('--yaw', type=float, help='Model rotation around Y in degrees')
    p.add_argument('--scale', type=float, help='Uniform model scale')
    p.add_argument('--offset', type=float, nargs=3, metavar=('X', 'Y', 'Z'),
                   help='Model translation in world space')
    return parser


def config_from_args(args) -> RenderConfig:
    yaw = getattr(args, 'yaw', None)
    return RenderConfig().with_overrides(
        width=args.width,
        height=args.height,
        light_dir=_vec3(getattr(args, 'light', None)),
        camera_z=getattr(args, 'camera_z', None),
        eye=_vec3(getattr(args, 'eye', None)),
        up=_vec3(getattr(args, 'up', None)),
        depth=getattr(args, 'depth', None),
        model_yaw=math.radians(yaw) if yaw is not None else None,
        model_scale=getattr(args, 'scale', None),
        model_offset=_vec3(getattr(args, 'offset', None)),
        seed=getattr(args, 'seed', None),
    )


def run(args, cfg: RenderConfig):
    """Dispatch one sub-command; returns the rendered FrameBuffer."""
    output = args.output or DEFAULT_OUTPUT[args.command]
    w, h = cfg.width, cfg.height

    if args.command == 'triangle':
        return pipeline.draw_triangle_demo(output, w, h)
    if args.command == 'flat':
        return pipeline.flat_shading_render(args.mesh, output, w, h, seed=cfg.seed)
    if args.command == 'illumination':
        return pipeline.flat_shading_illumination(args.mesh, output, w, h, cfg.light_dir)
    if args.command == 'texture':
        return pipeline.render_with_texture(args.mesh, args.texture, output, w, h, cfg.light_dir)
    if args.command == 'projection':
        return pipeline.render_with_projection(args.mesh, args.texture, output, w, h,
                                               cfg.light_dir, camera_z=cfg.camera_z)
    if args.command == 'ortho':
        return pipeline.render_ortho(args.mesh, args.texture, output, w, h,
                                     cfg.light_dir, camera_z=cfg.camera_z)
    if args.command == 'camera':
        return pipeline.render_with_camera(args.mesh, args.texture, output, w, h,
                                           eye=cfg.eye, up=cfg.up, camera_z=cfg.camera_z,
                                           depth_range=cfg.depth, light_dir=cfg.light_dir,
                                           model_yaw=cfg.model_yaw, model_scale=cfg.model_scale,
                                           model_offset=cfg.model_offset)
    raise ValueError(f"unknown command {args.command!r}")


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv if argv is not None else sys.argv[1:])
    setup_logging(getattr(logging, args.log_level), args.log_file)

    try:
        cfg = config_from_args(args)
        fb = run(args, cfg)
    except (OSError, ValueError) as e:
        logger.error("Render failed: %s", e)
        return 1

    if args.preview:
        from tinyrender import preview
        preview.show(fb, title=f"tinyrender {args.command}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
