"""
Face Assembly and Triangulation Module

Splits OBJ face lines into vertex descriptors, triangulates quads and
parses the slash-delimited p/t/n indices of each descriptor.

Quads are split on the fixed diagonal (a, b, c), (a, c, d) by default. That
split is wrong for non-convex quads; earcut_triangulate_quad projects the
quad onto its plane and lets earcut choose the diagonal instead.
"""

import math
from typing import List, Sequence, Tuple

import numpy as np
from mapbox_earcut import triangulate_float64

from obj_errors import MalformedFaceDegree, MalformedVertexDescriptor
from obj_mesh_component import Position
from obj_tokenize import TokenizeError, parse_int, tokenize

Descriptor = Tuple[int, int, int]


def split_face_line(line: str) -> List[str]:
    """
    Split an "f ..." line into its vertex descriptor strings.

    Args:
        line: Face line, including the "f" prefix

    Returns:
        3 or 4 descriptor strings

    Raises:
        MalformedFaceDegree: The face is not a triangle or a quad
    """
    descriptors = tokenize(line, max_tokens=5, sentinel="", convert=None)
    if len(descriptors) not in (3, 4):
        raise MalformedFaceDegree(line)
    return descriptors


def fan_triangulate(descriptors: Sequence[str]) -> List[str]:
    """
    Triangulate a triangle or quad on the fixed diagonal.

    Args:
        descriptors: 3 or 4 face vertices (a, b, c[, d])

    Returns:
        Flat list of triangle corners: (a, b, c) or (a, b, c, a, c, d)
    """
    if len(descriptors) == 3:
        return list(descriptors)
    a, b, c, d = descriptors
    return [a, b, c, a, c, d]


def parse_descriptor(text: str) -> Descriptor:
    """
    Parse a "p[/t][/n]" descriptor into 1-based (p, t, n); 0 means absent.

    Raises:
        MalformedVertexDescriptor: No fields, or a field is not an integer
    """
    try:
        fields = tokenize(text, max_tokens=3, skip_first=False, delim='/',
                          sentinel=0, convert=parse_int)
    except TokenizeError:
        raise MalformedVertexDescriptor(text) from None
    if len(fields) <= 0:
        raise MalformedVertexDescriptor(text)
    fields.extend([0] * (3 - len(fields)))
    return fields[0], fields[1], fields[2]


def face_normal(points: Sequence[Position]) -> Tuple[float, float, float]:
    """
    Calculate the normal vector of a polygon using Newell's method.

    Args:
        points: Polygon corners in winding order

    Returns:
        Normalized normal vector (nx, ny, nz), (0, 0, 0) if degenerate
    """
    normal_vec = [0.0, 0.0, 0.0]
    num_points = len(points)

    for idx in range(num_points):
        cx, cy, cz = points[idx]
        nx, ny, nz = points[(idx + 1) % num_points]

        normal_vec[0] += (cy - ny) * (cz + nz)
        normal_vec[1] += (cz - nz) * (cx + nx)
        normal_vec[2] += (cx - nx) * (cy + ny)

    length = math.sqrt(normal_vec[0] ** 2 + normal_vec[1] ** 2 + normal_vec[2] ** 2)

    if length > 1e-10:
        return (normal_vec[0] / length, normal_vec[1] / length, normal_vec[2] / length)
    return (0.0, 0.0, 0.0)


def create_local_coordinate_system(normal: Tuple[float, float, float]) -> Tuple[
    Tuple[float, float, float],
    Tuple[float, float, float]
]:
    """
    Create two orthonormal axes spanning the plane with the given normal.

    Args:
        normal: Unit normal vector (nx, ny, nz)

    Returns:
        Tuple of (u_axis, v_axis)
    """
    nx, ny, nz = normal

    # Reference axis that is not parallel to the normal
    if abs(nx) < 0.9:
        ref = (1.0, 0.0, 0.0)
    else:
        ref = (0.0, 1.0, 0.0)

    # u = ref x normal
    ux = ref[1] * nz - ref[2] * ny
    uy = ref[2] * nx - ref[0] * nz
    uz = ref[0] * ny - ref[1] * nx
    u_len = math.sqrt(ux ** 2 + uy ** 2 + uz ** 2)
    ux, uy, uz = ux / u_len, uy / u_len, uz / u_len

    # v = normal x u
    vx = ny * uz - nz * uy
    vy = nz * ux - nx * uz
    vz = nx * uy - ny * ux

    return ((ux, uy, uz), (vx, vy, vz))


def project_to_2d(points: Sequence[Position],
                  u_axis: Tuple[float, float, float],
                  v_axis: Tuple[float, float, float]) -> np.ndarray:
    """
    Project 3D points onto the plane spanned by u_axis and v_axis.

    Returns:
        (n, 2) array of plane coordinates relative to the first point
    """
    pts = np.asarray(points, dtype=np.float64)
    rel = pts - pts[0]
    return np.stack([rel @ np.asarray(u_axis), rel @ np.asarray(v_axis)], axis=1)


def compute_polygon_area_2d(points_2d: np.ndarray) -> float:
    """Signed area of a 2D polygon (positive for CCW)."""
    x = points_2d[:, 0]
    y = points_2d[:, 1]
    return 0.5 * float(np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y))


def earcut_triangulate_quad(descriptors: Sequence[str],
                            points: Sequence[Position]) -> List[str]:
    """
    Triangulate a quad with earcut on its own plane.

    Triangles keep the winding of the original face. Degenerate quads
    (zero normal or zero projected area) fall back to the fixed diagonal.

    Args:
        descriptors: 4 face vertex descriptors
        points: The 4 resolved positions of those descriptors

    Returns:
        Flat list of 6 triangle corners
    """
    if len(descriptors) != 4:
        return fan_triangulate(descriptors)

    f_normal = face_normal(points)
    if f_normal == (0.0, 0.0, 0.0):
        return fan_triangulate(descriptors)

    u_axis, v_axis = create_local_coordinate_system(f_normal)
    points_2d = project_to_2d(points, u_axis, v_axis)
    if abs(compute_polygon_area_2d(points_2d)) < 1e-10:
        return fan_triangulate(descriptors)

    rings = np.array([len(points_2d)], dtype=np.uint32)
    indices = triangulate_float64(points_2d, rings)
    if len(indices) != 6:
        return fan_triangulate(descriptors)

    corners = []
    for i in range(0, 6, 3):
        tri = [int(indices[i]), int(indices[i + 1]), int(indices[i + 2])]

        # Reverse winding if the triangle faces away from the quad
        t_normal = face_normal([points[k] for k in tri])
        dot_product = (f_normal[0] * t_normal[0] +
                       f_normal[1] * t_normal[1] +
                       f_normal[2] * t_normal[2])
        if dot_product < 0:
            tri.reverse()

        corners.extend(descriptors[k] for k in tri)
    return corners
