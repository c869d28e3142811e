import math
from typing import List, Optional, Sequence, Tuple

from tinyrender.geometry import Point3D

Vec4 = Tuple[float, float, float, float]


# ============================================================
#  Fixed-size matrices
# ============================================================

class _Matrix:
    """
    Square matrix of fixed size N stored as a flat column-major buffer.

    get(i, j) reads row i, column j, i.e. buffer[i + N*j].
    Products return new matrices; only set() mutates.
    """
    N = 0

    def __init__(self, buffer: Optional[Sequence[float]] = None):
        size = self.N * self.N
        if buffer is None:
            self.buffer: List[float] = [0.0] * size
        else:
            if len(buffer) != size:
                raise ValueError(f"{type(self).__name__} needs {size} values, got {len(buffer)}")
            self.buffer = [float(v) for v in buffer]

    @classmethod
    def zero(cls):
        return cls()

    @classmethod
    def identity(cls):
        m = cls()
        for i in range(cls.N):
            m.set(i, i, 1.0)
        return m

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[float]]):
        """Build from a row-major nested list, the way matrices are written on paper."""
        m = cls()
        for i, row in enumerate(rows):
            for j, val in enumerate(row):
                m.set(i, j, val)
        return m

    def get(self, i: int, j: int) -> float:
        return self.buffer[i + self.N * j]

    def set(self, i: int, j: int, val: float) -> None:
        self.buffer[i + self.N * j] = float(val)

    def rows(self) -> List[List[float]]:
        return [[self.get(i, j) for j in range(self.N)] for i in range(self.N)]

    def matmul(self, o):
        """Naive triple-loop matrix product self * o."""
        r = type(self)()
        for i in range(self.N):
            for j in range(self.N):
                s = 0.0
                for k in range(self.N):
                    s += self.get(i, k) * o.get(k, j)
                r.set(i, j, s)
        return r

    __matmul__ = matmul

    def __eq__(self, o):
        if type(o) is not type(self):
            return NotImplemented
        return self.buffer == o.buffer

    def __repr__(self):
        body = "\n".join("[ " + " ".join(str(v) for v in row) + " ]" for row in self.rows())
        return f"{type(self).__name__}(\n{body}\n)"


class Matrix3(_Matrix):
    """3x3 matrix; multiplies Point3D directly."""
    N = 3

    def mul_point(self, p: Point3D) -> Point3D:
        return Point3D(
            self.get(0, 0) * p.x + self.get(0, 1) * p.y + self.get(0, 2) * p.z,
            self.get(1, 0) * p.x + self.get(1, 1) * p.y + self.get(1, 2) * p.z,
            self.get(2, 0) * p.x + self.get(2, 1) * p.y + self.get(2, 2) * p.z,
        )


class Matrix4(_Matrix):
    """
    4x4 matrix for homogeneous transforms.

    Used for the viewport, projection and model-view parts of the pipeline.
    """
    N = 4

    def mul_vec4(self, v: Sequence[float]) -> Vec4:
        """Matrix times homogeneous 4-vector."""
        return tuple(
            self.get(i, 0) * v[0] + self.get(i, 1) * v[1] + self.get(i, 2) * v[2] + self.get(i, 3) * v[3]
            for i in range(4)
        )

    def mul_point(self, p: Point3D, w: float = 1.0) -> Vec4:
        return self.mul_vec4((p.x, p.y, p.z, w))


def project_point(m: Matrix4, p: Point3D) -> Point3D:
    """Transform p (w=1) and divide by the resulting w."""
    x, y, z, w = m.mul_point(p)
    return Point3D(x / w, y / w, z / w)


# ============================================================
#  3D transforms
# ============================================================

def translate(tx, ty, tz) -> Matrix4:
    """Translation matrix: (x, y, z) -> (x + tx, y + ty, z + tz)."""
    m = Matrix4.identity()
    m.set(0, 3, tx)
    m.set(1, 3, ty)
    m.set(2, 3, tz)
    return m


def scale(sx, sy, sz) -> Matrix4:
    """Scaling matrix: (x, y, z) -> (sx*x, sy*y, sz*z)."""
    m = Matrix4.identity()
    m.set(0, 0, sx)
    m.set(1, 1, sy)
    m.set(2, 2, sz)
    return m


def rotate_y(a) -> Matrix4:
    """Rotation around Y axis by angle a (radians)."""
    c, s = math.cos(a), math.sin(a)
    m = Matrix4.identity()
    m.set(0, 0, c)
    m.set(0, 2, s)
    m.set(2, 0, -s)
    m.set(2, 2, c)
    return m


# ============================================================
#  Pipeline stages
# ============================================================

def viewport(w: float, h: float, d: float) -> Matrix4:
    """
    Map the cube [-1,1]^3 onto [0,w] x [0,h] x [0,d].

      [ w/2  0    0   w/2 ]
      [  0  h/2   0   h/2 ]
      [  0   0   d/2  d/2 ]
      [  0   0    0   1   ]
    """
    return Matrix4.from_rows([
        [w / 2.0, 0.0, 0.0, w / 2.0],
        [0.0, h / 2.0, 0.0, h / 2.0],
        [0.0, 0.0, d / 2.0, d / 2.0],
        [0.0, 0.0, 0.0, 1.0],
    ])


def projection(camera_z: float) -> Matrix4:
    """
    Central projection for a camera on the z axis at distance camera_z.

    The -1/c term makes w = 1 - z/c, so the homogeneous divide shrinks
    points that are farther from the camera.
    """
    m = Matrix4.identity()
    m.set(3, 2, -1.0 / camera_z)
    return m


def model_view(up: Point3D, camera: Point3D) -> Matrix4:
    """
    Rotate world space so that `camera` becomes the z axis.

    Rows are the orthonormal basis (up x camera, camera x (up x camera),
    camera). No translation is applied.
    """
    v = up.cross(camera)
    w = camera.cross(v)
    v, w, c = v.normalized(), w.normalized(), camera.normalized()
    return Matrix4.from_rows([
        [v.x, v.y, v.z, 0.0],
        [w.x, w.y, w.z, 0.0],
        [c.x, c.y, c.z, 0.0],
        [0.0, 0.0, 0.0, 1.0],
    ])


def perspective_factor(camera_z: float, z: float) -> Matrix3:
    """
    Per-vertex projection onto the screen plane as a 3x3 matrix.

      [ (c-1)/(c-z)      0       0 ]
      [      0      (c-1)/(c-z)  0 ]
      [      0           0       1 ]
    """
    m = Matrix3.identity()
    k = (camera_z - 1.0) / (camera_z - z)
    m.set(0, 0, k)
    m.set(1, 1, k)
    return m


def image_position(pos: float, size: float) -> float:
    """Map a normalized coordinate in [-1, 1] to [0, size]."""
    return size * (pos + 1.0) / 2.0
