"""
JavaScript Array Writer Module

Writes mesh buffers as JavaScript array literals:

    let vbo = [
        x, y, z, u, v, nx, ny, nz,
    ];

    let ebo = [
        0, 1, 2,
    ];
"""

from typing import TextIO

from obj_mesh_component import MeshBuffers


def format_value(value: float, precision: int = 5) -> str:
    """Format a float with the given number of significant digits."""
    return f"{value:.{precision}g}"


def js_array_writer(js_out: TextIO, buffers: MeshBuffers, precision: int = 5,
                    vbo_name: str = "vbo", ebo_name: str = "ebo"):
    """
    Write vertex and index buffers as JavaScript arrays.

    Each vertex gets its own row, so buffers with mixed attribute layouts
    remain readable; every triangle gets its own row in the index array.

    Args:
        js_out: Output file object
        buffers: MeshBuffers to write
        precision: Significant digits for vertex values
        vbo_name: Variable name of the vertex array
        ebo_name: Variable name of the index array
    """
    # Write vertices
    js_out.write(f"let {vbo_name} = [")
    for vertex in buffers.vertices:
        js_out.write("\n   ")
        for value in vertex.values():
            js_out.write(f" {format_value(value, precision)},")
    js_out.write("\n];\n\n")

    # Write triangles
    js_out.write(f"let {ebo_name} = [")
    for i, index in enumerate(buffers.indices):
        if i % 3 == 0:
            js_out.write("\n   ")
        js_out.write(f" {index},")
    js_out.write("\n];\n\n")
