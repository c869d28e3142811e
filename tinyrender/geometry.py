import math
from dataclasses import dataclass
from typing import Optional, Tuple

from tinyrender import raster


# ============================================================
#  Math primitives
# ============================================================

@dataclass(frozen=True)
class Point:
    """
    2D point in logical pixel space.

    Returned by Triangle.compute_bbox as the south-west / north-east corners.
    """
    x: float
    y: float

    def add(self, o: "Point") -> "Point":
        return Point(self.x + o.x, self.y + o.y)

    def sub(self, o: "Point") -> "Point":
        return Point(self.x - o.x, self.y - o.y)

    __add__ = add
    __sub__ = sub


@dataclass(frozen=True)
class Point3D:
    """
    3D vector for positions, normals, light direction and texture coordinates.

    Note:
      - Immutable; every operation returns a new value.
      - Texture coordinates reuse this type with z unused.
    """
    x: float
    y: float
    z: float

    @staticmethod
    def zero() -> "Point3D":
        return Point3D(0.0, 0.0, 0.0)

    @staticmethod
    def from_seq(seq) -> "Point3D":
        """Build from any 3-item sequence (list, tuple, numpy row)."""
        return Point3D(float(seq[0]), float(seq[1]), float(seq[2]))

    def to_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def add(self, o: "Point3D") -> "Point3D":
        return Point3D(self.x + o.x, self.y + o.y, self.z + o.z)

    def sub(self, o: "Point3D") -> "Point3D":
        return Point3D(self.x - o.x, self.y - o.y, self.z - o.z)

    def scale(self, k: float) -> "Point3D":
        return Point3D(self.x * k, self.y * k, self.z * k)

    def div(self, k: float) -> "Point3D":
        return Point3D(self.x / k, self.y / k, self.z / k)

    def dot(self, o: "Point3D") -> float:
        """Dot product (scalar product)."""
        return self.x * o.x + self.y * o.y + self.z * o.z

    def cross(self, o: "Point3D") -> "Point3D":
        """
        Cross product, expanded as the determinant of

          [   i     j     k  ]
          [ self.x self.y self.z ]
          [  o.x   o.y   o.z ]
        """
        return Point3D(
            self.y * o.z - o.y * self.z,
            -(self.x * o.z - o.x * self.z),
            self.x * o.y - o.x * self.y,
        )

    def length(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.dot(self))

    def normalized(self) -> "Point3D":
        """Unit vector in the same direction; the zero vector stays zero."""
        n = self.length()
        if n <= 1e-12:
            return Point3D.zero()
        return self.scale(1.0 / n)

    __add__ = add
    __sub__ = sub


# ============================================================
#  Triangle
# ============================================================

@dataclass(frozen=True)
class Triangle:
    """
    Three vertices in logical pixel space (x, y) plus a depth value (z).

    Winding order is free: barycentric weights are normalized by the signed
    area, so both orders classify the same points as inside.
    """
    v0: Point3D
    v1: Point3D
    v2: Point3D

    @classmethod
    def from_points(cls, pts) -> "Triangle":
        a, b, c = pts
        return cls(a, b, c)

    @property
    def vertices(self) -> Tuple[Point3D, Point3D, Point3D]:
        return (self.v0, self.v1, self.v2)

    def coords(self) -> Tuple[float, ...]:
        """Flat (x0, y0, z0, x1, y1, z1, x2, y2, z2) for the raster kernels."""
        return tuple(float(c) for v in self.vertices for c in (v.x, v.y, v.z))

    def area2(self) -> float:
        """Twice the signed screen-space area."""
        x0, y0, _, x1, y1, _, x2, y2, _ = self.coords()
        return raster.signed_area2(x0, y0, x1, y1, x2, y2)

    def is_degenerate(self) -> bool:
        return abs(self.area2()) < raster.DEGENERATE_EPS

    def compute_bbox(self) -> Tuple[Point, Point]:
        """
        Pixel-aligned bounding box as (south-west, north-east).

        The minimum is floored and the maximum ceiled, so the whole triangle
        lies inside the box when both corners are inclusive.
        """
        xs = [v.x for v in self.vertices]
        ys = [v.y for v in self.vertices]
        return (Point(math.floor(min(xs)), math.floor(min(ys))),
                Point(math.ceil(max(xs)), math.ceil(max(ys))))

    def barycentric_coords(self, point: Point3D) -> Optional[Point3D]:
        """
        Weights (u, v, w) with point = u*V0 + v*V1 + w*V2 and u+v+w == 1.

        Only x and y of the point are used. Returns None for a zero-area
        triangle.
        """
        area2 = self.area2()
        if abs(area2) < raster.DEGENERATE_EPS:
            return None
        x0, y0, _, x1, y1, _, x2, y2, _ = self.coords()
        u, v, w = raster.barycentric(x0, y0, x1, y1, x2, y2,
                                     float(point.x), float(point.y), area2)
        return Point3D(u, v, w)

    def barycentric_coords_xy(self, x: float, y: float) -> Optional[Point3D]:
        return self.barycentric_coords(Point3D(x, y, 0.0))

    def point_in_triangle(self, x: float, y: float) -> bool:
        """True when (x, y) is inside or on the boundary."""
        bc = self.barycentric_coords_xy(x, y)
        if bc is None:
            return False
        return bc.x >= 0.0 and bc.y >= 0.0 and bc.z >= 0.0

    def normal(self) -> Point3D:
        """
        Unit face normal (V2 - V0) x (V1 - V0).

        Used for flat lighting; its sign depends on the winding.
        """
        return self.v2.sub(self.v0).cross(self.v1.sub(self.v0)).normalized()

    def sorted_by_y(self) -> "Triangle":
        """Same triangle with vertices in increasing y order."""
        return Triangle.from_points(sorted(self.vertices, key=lambda p: p.y))
