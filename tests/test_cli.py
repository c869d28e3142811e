import math

import pytest
from PIL import Image

from tinyrender import cli
from tinyrender.geometry import Point3D


def test_triangle_command(tmp_path):
    out = tmp_path / "tri.png"
    assert cli.main(["triangle", "-o", str(out), "--width", "64", "--height", "64"]) == 0
    with Image.open(out) as img:
        assert img.size == (64, 64)


def test_texture_command(tmp_path, quad_obj, solid_texture_png):
    out = tmp_path / "tex.tga"
    rc = cli.main(["texture", str(quad_obj), "--texture", str(solid_texture_png),
                   "-o", str(out), "--width", "32", "--height", "32"])
    assert rc == 0
    with Image.open(out) as img:
        assert img.convert("RGB").getpixel((16, 16)) == (200, 100, 50)


def test_camera_command(tmp_path, quad_obj, solid_texture_png):
    out = tmp_path / "cam.png"
    rc = cli.main(["camera", str(quad_obj), "--texture", str(solid_texture_png),
                   "-o", str(out), "--width", "32", "--height", "32", "--eye", "0", "0", "3"])
    assert rc == 0
    with Image.open(out) as img:
        assert img.getpixel((16, 16)) == (200, 100, 50)


@pytest.mark.parametrize("command", ["flat", "illumination"])
def test_mesh_commands(tmp_path, quad_obj, command):
    out = tmp_path / f"{command}.png"
    assert cli.main([command, str(quad_obj), "-o", str(out), "--width", "16", "--height", "16"]) == 0
    assert out.exists()


def test_missing_mesh_fails(tmp_path):
    out = tmp_path / "never.png"
    rc = cli.main(["illumination", str(tmp_path / "missing.obj"), "-o", str(out)])
    assert rc == 1
    assert not out.exists()


def test_malformed_mesh_fails(tmp_path):
    bad = tmp_path / "bad.obj"
    bad.write_text("v 0 0 0\nf 1 2 3\n")
    assert cli.main(["flat", str(bad), "-o", str(tmp_path / "x.png")]) == 1


def test_texture_option_is_required(quad_obj):
    with pytest.raises(SystemExit):
        cli.main(["texture", str(quad_obj)])


def test_log_file(tmp_path):
    log = tmp_path / "run.log"
    cli.main(["triangle", "-o", str(tmp_path / "t.png"), "--width", "8", "--height", "8",
              "--log-file", str(log)])
    assert "image written to" in log.read_text()


def test_config_from_args():
    args = cli.build_parser().parse_args(
        ["camera", "m.obj", "--texture", "t.png", "--yaw", "90", "--eye", "0", "0", "3",
         "--light", "0", "0", "-2", "--width", "200"])
    cfg = cli.config_from_args(args)
    assert cfg.width == 200
    assert cfg.height == 500
    assert cfg.model_yaw == pytest.approx(math.pi / 2)
    assert cfg.eye == Point3D(0.0, 0.0, 3.0)
    assert cfg.light_dir == Point3D(0.0, 0.0, -2.0)


def test_projection_default_camera_distance():
    args = cli.build_parser().parse_args(["projection", "m.obj", "--texture", "t.png"])
    assert cli.config_from_args(args).camera_z == 5.0


def test_default_output_name():
    args = cli.build_parser().parse_args(["ortho", "m.obj", "--texture", "t.png"])
    assert args.output is None
    assert cli.DEFAULT_OUTPUT[args.command] == "with_texture_ortho.tga"


def test_offset_option():
    args = cli.build_parser().parse_args(
        ["camera", "m.obj", "--texture", "t.png", "--offset", "0.5", "0", "-1"])
    assert cli.config_from_args(args).model_offset == Point3D(0.5, 0.0, -1.0)
