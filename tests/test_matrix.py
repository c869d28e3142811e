import math

import pytest

from tinyrender.geometry import Point3D
from tinyrender.matrix import (
    Matrix3, Matrix4, image_position, model_view, perspective_factor, project_point, projection,
    rotate_y, scale, translate, viewport,
)


def assert_rows_approx(m, rows):
    for got, want in zip(m.rows(), rows):
        assert got == pytest.approx(want, abs=1e-12)


# ============================================================
#  Storage and products
# ============================================================

def test_identity_and_zero():
    ident = Matrix4.identity()
    zero = Matrix4.zero()
    for i in range(4):
        for j in range(4):
            assert ident.get(i, j) == (1.0 if i == j else 0.0)
            assert zero.get(i, j) == 0.0


def test_buffer_is_column_major():
    m = Matrix4.from_rows([[1, 2, 3, 4],
                           [5, 6, 7, 8],
                           [9, 10, 11, 12],
                           [13, 14, 15, 16]])
    assert m.buffer[:4] == [1.0, 5.0, 9.0, 13.0]
    assert m.get(1, 0) == 5.0
    assert m.get(0, 1) == 2.0


def test_matrix3_times_point():
    m = Matrix3([0.0, 1.0, 0.0, -1.0, 1.0, 0.0, 0.0, 0.0, 0.5])
    assert m.mul_point(Point3D(3.0, 5.0, 2.0)) == Point3D(-5.0, 8.0, 1.0)


def test_wrong_buffer_length():
    with pytest.raises(ValueError):
        Matrix3([1.0, 2.0])


def test_set_mutates_single_entry():
    m = Matrix3.zero()
    m.set(2, 1, 7.0)
    assert m.get(2, 1) == 7.0
    assert sum(m.buffer) == 7.0


def test_matmul():
    a = Matrix3.from_rows([[1, 2, 0], [3, 4, 0], [0, 0, 1]])
    b = Matrix3.from_rows([[0, 1, 0], [1, 0, 0], [0, 0, 2]])
    assert (a @ b).rows() == [[2.0, 1.0, 0.0], [4.0, 3.0, 0.0], [0.0, 0.0, 2.0]]
    # operands are not modified
    assert a.rows()[0] == [1.0, 2.0, 0.0]
    assert a @ Matrix3.identity() == a


def test_mul_vec4():
    m = Matrix4.from_rows([[1, 0, 0, 10],
                           [0, 2, 0, 20],
                           [0, 0, 3, 30],
                           [0, 0, 0, 1]])
    assert m.mul_vec4((1.0, 1.0, 1.0, 1.0)) == (11.0, 22.0, 33.0, 1.0)
    assert m.mul_point(Point3D(1.0, 1.0, 1.0), w=0.0) == (1.0, 2.0, 3.0, 0.0)


# ============================================================
#  Transforms
# ============================================================

@pytest.mark.parametrize("pos", [-1.0, -0.5, 0.0, 0.25, 1.0])
def test_viewport_maps_unit_cube(pos):
    p = project_point(viewport(640, 480, 255), Point3D(pos, pos, pos))
    assert p.x == pytest.approx(image_position(pos, 640))
    assert p.y == pytest.approx(image_position(pos, 480))
    assert p.z == pytest.approx(image_position(pos, 255))


def test_image_position():
    assert image_position(-1.0, 100) == 0.0
    assert image_position(0.0, 100) == 50.0
    assert image_position(1.0, 100) == 100.0


def test_projection_divides_by_distance_to_camera():
    m = projection(4.0)
    assert project_point(m, Point3D(1.0, 2.0, 0.0)) == Point3D(1.0, 2.0, 0.0)
    # w = 1 - z/c = 0.5
    assert project_point(m, Point3D(1.0, 2.0, 2.0)).to_tuple() == pytest.approx((2.0, 4.0, 4.0))


def test_model_view_looking_down_z_is_identity():
    m = model_view(Point3D(0.0, 1.0, 0.0), Point3D(0.0, 0.0, 3.0))
    assert_rows_approx(m, Matrix4.identity().rows())


def test_model_view_maps_camera_onto_z_axis():
    eye = Point3D(-2.0, 1.0, 3.0)
    m = model_view(Point3D(0.0, 1.0, 0.0), eye)
    x, y, z, w = m.mul_point(eye.normalized())
    assert (x, y, z, w) == pytest.approx((0.0, 0.0, 1.0, 1.0), abs=1e-12)

    rows = [Point3D.from_seq(r[:3]) for r in m.rows()[:3]]
    for i in range(3):
        assert rows[i].length() == pytest.approx(1.0)
        for j in range(i + 1, 3):
            assert rows[i].dot(rows[j]) == pytest.approx(0.0, abs=1e-12)


def test_perspective_factor():
    m = perspective_factor(5.0, 0.0)
    assert m.mul_point(Point3D(1.0, -1.0, 0.0)).to_tuple() == pytest.approx((0.8, -0.8, 0.0))
    m = perspective_factor(5.0, 1.0)
    assert m.mul_point(Point3D(1.0, 1.0, 1.0)).to_tuple() == pytest.approx((1.0, 1.0, 1.0))


def test_scale_and_rotation():
    p = Point3D(1.0, 2.0, 3.0)
    assert scale(2.0, 3.0, 4.0).mul_point(p)[:3] == (2.0, 6.0, 12.0)

    r = rotate_y(math.pi / 3)
    x, y, z, _ = r.mul_point(p)
    assert y == pytest.approx(2.0)
    assert math.hypot(x, z) == pytest.approx(math.hypot(1.0, 3.0))
    assert_rows_approx(r @ rotate_y(-math.pi / 3), Matrix4.identity().rows())


def test_translate():
    m = translate(1.0, -2.0, 3.0)
    assert project_point(m, Point3D(1.0, 1.0, 1.0)) == Point3D(2.0, -1.0, 4.0)
    # directions (w = 0) are not moved
    assert m.mul_point(Point3D(1.0, 1.0, 1.0), w=0.0) == (1.0, 1.0, 1.0, 0.0)
