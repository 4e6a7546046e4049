"""
Binary Writer Module

Writes mesh buffers as raw little-endian data ready for GPU upload:

    uint32 vertex count
    uint32 stride (floats per vertex)
    uint32 index count
    uint32 flags (bit 0: texcoords, bit 1: normals)
    float32[vertex count * stride] vertex data
    uint32[index count] index data
"""

from typing import BinaryIO

import numpy as np

from obj_mesh_component import MeshBuffers

FLAG_TEXCOORD = 1
FLAG_NORMAL = 2


def bin_writer(bin_out: BinaryIO, buffers: MeshBuffers):
    """
    Write mesh buffers in the binary layout above.

    Args:
        bin_out: Binary output file object
        buffers: MeshBuffers with a uniform attribute layout

    Raises:
        ValueError: The vertices do not share one attribute layout
    """
    stride = buffers.stride
    if stride is None:
        raise ValueError("Binary output needs every vertex to carry the same attributes")

    flags = 0
    if buffers.vertices and buffers.vertices[0].has_texcoord:
        flags |= FLAG_TEXCOORD
    if buffers.vertices and buffers.vertices[0].has_normal:
        flags |= FLAG_NORMAL

    header = np.array([len(buffers.vertices), stride, len(buffers.indices), flags],
                      dtype='<u4')
    bin_out.write(header.tobytes())
    bin_out.write(buffers.vertex_data(dtype='<f4').tobytes('C'))
    bin_out.write(buffers.index_data(dtype='<u4').tobytes('C'))
