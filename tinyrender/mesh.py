"""
Wavefront OBJ loading.

The renderer only needs flat arrays: positions, texture coordinates and a
triangle index list where one index addresses both a position and a texture
coordinate. OBJ faces index positions and texture coordinates separately,
so every distinct (v, vt) pair becomes one unified vertex.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Tuple, Union

import numpy as np

from tinyrender.geometry import Point3D

logger = logging.getLogger(__name__)


class MeshError(ValueError):
    """Malformed OBJ record or a face referencing a missing vertex."""


@dataclass
class Mesh:
    """
    Indexed triangle mesh.

      positions - float array (n, 3)
      texcoords - float array (n, 2), zeros when the file has no vt records
      indices   - int array (faces*3,), three entries per triangle
    """
    positions: np.ndarray
    texcoords: np.ndarray
    indices: np.ndarray
    has_texcoords: bool = False

    @property
    def n_faces(self) -> int:
        return len(self.indices) // 3

    def face(self, f: int) -> Tuple[int, int, int]:
        i = 3 * f
        return int(self.indices[i]), int(self.indices[i + 1]), int(self.indices[i + 2])

    def position(self, v: int) -> Point3D:
        return Point3D.from_seq(self.positions[v])

    def texcoord(self, v: int) -> Tuple[float, float]:
        u, t = self.texcoords[v]
        return float(u), float(t)

    def faces(self) -> Iterator[Tuple[int, int, int]]:
        for f in range(self.n_faces):
            yield self.face(f)


def _resolve(idx: str, count: int, kind: str, lineno: int) -> int:
    """OBJ indices are 1-based; negative ones count back from the end."""
    try:
        i = int(idx)
    except ValueError:
        raise MeshError(f"line {lineno}: bad {kind} index {idx!r}") from None
    if i > 0:
        i -= 1
    elif i < 0:
        i += count
    else:
        raise MeshError(f"line {lineno}: {kind} index 0 is not valid")
    if not 0 <= i < count:
        raise MeshError(f"line {lineno}: {kind} index {idx} out of range ({count} defined)")
    return i


def _floats(parts: List[str], n: int, lineno: int) -> List[float]:
    if len(parts) < n + 1:
        raise MeshError(f"line {lineno}: expected {n} values in {' '.join(parts)!r}")
    try:
        return [float(p) for p in parts[1:n + 1]]
    except ValueError:
        raise MeshError(f"line {lineno}: non-numeric value in {' '.join(parts)!r}") from None


def parse_obj(lines) -> Mesh:
    """
    Parse OBJ text (an iterable of lines).

    Supported:
      v  x y z
      vt u v
      f  v  |  v/vt  |  v/vt/vn  |  v//vn     (polygons are fan-triangulated)

    Normals, groups, materials and comments are ignored.
    """
    verts: List[List[float]] = []
    uvs: List[List[float]] = []
    unified: Dict[Tuple[int, int], int] = {}
    out_pos: List[List[float]] = []
    out_uv: List[List[float]] = []
    indices: List[int] = []

    def corner(token: str, lineno: int) -> int:
        comps = token.split("/")
        vi = _resolve(comps[0], len(verts), "vertex", lineno)
        vti = -1
        if len(comps) > 1 and comps[1]:
            vti = _resolve(comps[1], len(uvs), "texture", lineno)
        key = (vi, vti)
        if key not in unified:
            unified[key] = len(out_pos)
            out_pos.append(verts[vi])
            out_uv.append(uvs[vti] if vti >= 0 else [0.0, 0.0])
        return unified[key]

    for lineno, line in enumerate(lines, start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        parts = line.split()
        tag = parts[0]
        if tag == "v":
            verts.append(_floats(parts, 3, lineno))
        elif tag == "vt":
            uvs.append(_floats(parts, 2, lineno))
        elif tag == "f":
            if len(parts) < 4:
                raise MeshError(f"line {lineno}: face needs at least 3 vertices")
            poly = [corner(tok, lineno) for tok in parts[1:]]
            # fan: (0,1,2), (0,2,3), ...
            for i in range(1, len(poly) - 1):
                indices.extend((poly[0], poly[i], poly[i + 1]))

    mesh = Mesh(
        positions=np.array(out_pos, dtype=np.float64).reshape(-1, 3),
        texcoords=np.array(out_uv, dtype=np.float64).reshape(-1, 2),
        indices=np.array(indices, dtype=np.int64),
        has_texcoords=bool(uvs),
    )
    return mesh


def load_obj(path: Union[str, Path], encoding: str = "utf-8") -> Mesh:
    """Read an OBJ file. OSError and MeshError propagate to the caller."""
    with open(path, "r", encoding=encoding, errors="ignore") as f:
        mesh = parse_obj(f)
    logger.info("Loaded %s: %d vertices, %d triangles", path, len(mesh.positions), mesh.n_faces)
    return mesh
