"""
Numba scan kernels.

Every rasterization variant of the frame buffer ends up in one of the
functions below. They work on plain numpy arrays and scalars so that numba
can compile them:

  pixels - uint8 array, shape (width*height, 3), row 0 is the TOP row
  zbuf   - float32 array, shape (width*height,)
  tex    - uint8 array, shape (tex_h, tex_w, 3), row 0 is the TOP row

Logical coordinates are floats with the origin in the bottom-left corner.
"""
import math

from numba import njit

# |twice signed area| below this is treated as a zero-area triangle
DEGENERATE_EPS = 1e-12


# ============================================================
#  Coordinate mapping
# ============================================================

@njit(cache=True)
def clamp_index(num, dim):
    """Saturate a float coordinate to a buffer index in [0, dim-1]."""
    if int(num) >= dim:
        return dim - 1
    if num <= 0.0:
        return 0
    return int(math.floor(num))


@njit(cache=True)
def wrap_index(num, dim):
    """
    Texture variant of clamp_index.

    Overflow wraps around with modulo, underflow clamps to zero.
    """
    if int(num) >= dim:
        return int(num) % dim
    if num <= 0.0:
        return 0
    return int(math.floor(num))


@njit(cache=True)
def pixel_index(x, y, width, height):
    """Flat buffer index of logical point (x, y), Y axis flipped."""
    row = clamp_index(height - y, height)
    col = clamp_index(x, width)
    return width * row + col


# ============================================================
#  Barycentric coordinates
# ============================================================

@njit(cache=True)
def signed_area2(x0, y0, x1, y1, x2, y2):
    """Twice the signed area of the triangle, positive for CCW winding."""
    return (x1 - x0) * (y2 - y0) - (y1 - y0) * (x2 - x0)


@njit(cache=True)
def barycentric(x0, y0, x1, y1, x2, y2, px, py, area2):
    """
    Barycentric weights of (px, py).

    Each weight is the 2D cross product of the edges running from P to the
    two opposite vertices. Dividing by area2 (their signed sum) gives
    u + v + w == 1 for both windings. The caller must reject area2 == 0.
    """
    e0x, e0y = x0 - px, y0 - py
    e1x, e1y = x1 - px, y1 - py
    e2x, e2y = x2 - px, y2 - py
    u = e1x * e2y - e1y * e2x
    v = e0y * e2x - e0x * e2y
    w = e0x * e1y - e0y * e1x
    return u / area2, v / area2, w / area2


# ============================================================
#  Triangle fills
# ============================================================

@njit(cache=True)
def fill_flat(pixels, width, height,
              x0, y0, x1, y1, x2, y2,
              minx, miny, maxx, maxy,
              r, g, b):
    """
    Write a constant color to every bbox point with non-negative weights.

    No depth test: whatever is drawn last wins.
    Returns the number of pixel writes.
    """
    area2 = signed_area2(x0, y0, x1, y1, x2, y2)
    if abs(area2) < DEGENERATE_EPS:
        return 0

    written = 0
    for xi in range(int(minx), int(maxx) + 1):
        x = float(xi)
        for yi in range(int(miny), int(maxy) + 1):
            y = float(yi)
            u, v, w = barycentric(x0, y0, x1, y1, x2, y2, x, y, area2)
            if u < 0.0 or v < 0.0 or w < 0.0:
                continue
            idx = pixel_index(x, y, width, height)
            pixels[idx, 0] = r
            pixels[idx, 1] = g
            pixels[idx, 2] = b
            written += 1
    return written


@njit(cache=True)
def fill_depth(pixels, zbuf, width, height,
               x0, y0, z0, x1, y1, z1, x2, y2, z2,
               minx, miny, maxx, maxy,
               r, g, b):
    """
    Constant color fill with a depth test.

    Depth is the barycentric blend of the vertex z values. A pixel is
    written only when its depth is strictly greater than the stored one.
    Returns the number of depth wins.
    """
    area2 = signed_area2(x0, y0, x1, y1, x2, y2)
    if abs(area2) < DEGENERATE_EPS:
        return 0

    written = 0
    for xi in range(int(minx), int(maxx) + 1):
        x = float(xi)
        for yi in range(int(miny), int(maxy) + 1):
            y = float(yi)
            u, v, w = barycentric(x0, y0, x1, y1, x2, y2, x, y, area2)
            if u < 0.0 or v < 0.0 or w < 0.0:
                continue

            z = u * z0 + v * z1 + w * z2
            idx = pixel_index(x, y, width, height)
            if zbuf[idx] < z:
                zbuf[idx] = z
                pixels[idx, 0] = r
                pixels[idx, 1] = g
                pixels[idx, 2] = b
                written += 1
    return written


@njit(cache=True)
def _shade(texel, intensity):
    val = texel * intensity
    if val <= 0.0:
        return 0
    if val >= 255.0:
        return 255
    return int(val)


@njit(cache=True)
def fill_textured(pixels, zbuf, width, height, tex,
                  x0, y0, z0, u0, v0,
                  x1, y1, z1, u1, v1,
                  x2, y2, z2, u2, v2,
                  minx, miny, maxx, maxy,
                  intensity):
    """
    Depth-tested fill that samples a texture (nearest texel).

    (u_i, v_i) are texture coordinates already scaled to texel units.
    A point counts as inside when its weights are all non-negative or all
    non-positive, so either winding is accepted.

    Texel lookup uses the frame buffer's vertical flip, but an overflowing
    coordinate wraps (modulo) instead of saturating.
    Returns the number of depth wins.
    """
    area2 = signed_area2(x0, y0, x1, y1, x2, y2)
    if abs(area2) < DEGENERATE_EPS:
        return 0

    th, tw, _ = tex.shape
    written = 0
    for xi in range(int(minx), int(maxx) + 1):
        x = float(xi)
        for yi in range(int(miny), int(maxy) + 1):
            y = float(yi)
            a, b, c = barycentric(x0, y0, x1, y1, x2, y2, x, y, area2)
            up = a >= 0.0 and b >= 0.0 and c >= 0.0
            dn = a <= 0.0 and b <= 0.0 and c <= 0.0
            if not (up or dn):
                continue

            z = a * z0 + b * z1 + c * z2
            idx = pixel_index(x, y, width, height)
            if zbuf[idx] < z:
                zbuf[idx] = z

                uu = a * u0 + b * u1 + c * u2
                vv = a * v0 + b * v1 + c * v2
                trow = wrap_index(th - vv, th)
                tcol = wrap_index(uu, tw)

                pixels[idx, 0] = _shade(tex[trow, tcol, 0], intensity)
                pixels[idx, 1] = _shade(tex[trow, tcol, 1], intensity)
                pixels[idx, 2] = _shade(tex[trow, tcol, 2], intensity)
                written += 1
    return written


# ============================================================
#  Lines
# ============================================================

@njit(cache=True)
def line_walk(pixels, width, height, x0, y0, x1, y1, steep, r, g, b):
    """
    Step x from x0 to x1 (inclusive) one unit at a time.

    y is computed from the slope. With steep=True the two axes were swapped
    by the caller and are swapped back when plotting.
    Expects x0 <= x1.
    """
    slope = 0.0 if x1 == x0 else (y1 - y0) / (x1 - x0)
    x = x0
    while x <= x1:
        y = slope * (x - x0) + y0
        if steep:
            idx = pixel_index(y, x, width, height)
        else:
            idx = pixel_index(x, y, width, height)
        pixels[idx, 0] = r
        pixels[idx, 1] = g
        pixels[idx, 2] = b
        x += 1.0
