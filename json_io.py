"""
JSON Writer Module

This module writes mesh buffers as a JSON document.
"""

import json
from typing import Any, Dict, Optional, TextIO

from obj_mesh_component import MeshBuffers


def buffers_to_json(buffers: MeshBuffers) -> Dict[str, Any]:
    """
    Convert mesh buffers to a JSON-serializable dict.

    Uniform buffers carry hasTexcoord/hasNormal flags; buffers with mixed
    attribute layouts carry a per-vertex "layout" list of [texcoord, normal]
    flags instead, and their stride is null.

    Args:
        buffers: MeshBuffers object

    Returns:
        Dictionary with stride, layout flags, vbo and ebo
    """
    data: Dict[str, Any] = {
        "stride": buffers.stride,
        "vertexCount": len(buffers.vertices),
        "triangleCount": buffers.triangle_count,
    }

    if buffers.is_uniform:
        first = buffers.vertices[0] if buffers.vertices else None
        data["hasTexcoord"] = bool(first and first.has_texcoord)
        data["hasNormal"] = bool(first and first.has_normal)
    else:
        data["layout"] = [[v.has_texcoord, v.has_normal] for v in buffers.vertices]

    data["vbo"] = [value for vertex in buffers.vertices for value in vertex.values()]
    data["ebo"] = list(buffers.indices)
    return data


def json_writer(json_out: TextIO, buffers: MeshBuffers, indent: Optional[int] = None):
    """
    Write mesh buffers as JSON.

    Args:
        json_out: Output file object
        buffers: MeshBuffers to write
        indent: JSON indentation, compact when None
    """
    json.dump(buffers_to_json(buffers), json_out, indent=indent)
    json_out.write("\n")
