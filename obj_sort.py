"""
Spatial Sort Module

Reorders a vertex buffer by position z, then x, and rewrites the index
buffer so every triangle still connects the same vertices.

z values are compared with an absolute tolerance. A plain "equal within
tolerance" test is not transitive (a~b and b~c while a<c), so ties are
formed as groups: walking the z-sorted vertices, a vertex joins the current
group while its z is within tolerance of the group's first z. Inside a group
vertices are ordered by x, then by their original slot.
"""

from typing import List

import numpy as np

from obj_mesh_component import MeshBuffers, Vertex


def sort_permutation(vertices: List[Vertex], tolerance: float = 1e-10) -> np.ndarray:
    """
    Compute the z-then-x order of a vertex buffer.

    Args:
        vertices: Vertex buffer
        tolerance: Absolute tolerance under which z values tie

    Returns:
        Array order where order[new_slot] = old_slot
    """
    if not vertices:
        return np.zeros(0, dtype=np.int64)

    positions = np.array([v.position for v in vertices], dtype=np.float64)
    z = positions[:, 2]
    x = positions[:, 0]

    by_z = np.argsort(z, kind='stable')

    # Group id per vertex: consecutive z within tolerance of the group anchor
    group = np.empty(len(vertices), dtype=np.int64)
    group_id = 0
    anchor = z[by_z[0]]
    for slot in by_z:
        if z[slot] - anchor > tolerance:
            group_id += 1
            anchor = z[slot]
        group[slot] = group_id

    # lexsort sorts by the last key first
    original = np.arange(len(vertices))
    return np.lexsort((original, x, group))


def sort_by_position_z_then_x(buffers: MeshBuffers, tolerance: float = 1e-10) -> MeshBuffers:
    """
    Return buffers with vertices sorted by z then x and indices remapped.

    Args:
        buffers: Completed vertex and index buffers
        tolerance: Absolute tolerance under which z values tie

    Returns:
        New MeshBuffers; the input is left unchanged
    """
    order = sort_permutation(buffers.vertices, tolerance)

    # Forward mapping old slot -> new slot
    remap = np.empty(len(order), dtype=np.int64)
    remap[order] = np.arange(len(order))

    vertices = [buffers.vertices[old] for old in order]
    indices = [int(remap[i]) for i in buffers.indices]
    return MeshBuffers(vertices=vertices, indices=indices)
