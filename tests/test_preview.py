import pytest

from tinyrender.framebuffer import RED, FrameBuffer


@pytest.fixture
def pygame(monkeypatch):
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    return pytest.importorskip("pygame")


def test_frame_to_surface_keeps_orientation(pygame):
    from tinyrender.preview import frame_to_surface

    fb = FrameBuffer(4, 3)
    # logical (1, 3) is the top row
    fb.set_pixel(1, 3, RED)
    surface = frame_to_surface(fb)
    assert surface.get_size() == (4, 3)
    assert tuple(surface.get_at((1, 0)))[:3] == RED
    assert tuple(surface.get_at((1, 2)))[:3] == (0, 0, 0)
