"""
Tests for the JavaScript, JSON and binary buffer writers
"""

import io
import json

import numpy as np
import pytest

from bin_io import FLAG_NORMAL, bin_writer
from js_io import format_value, js_array_writer
from json_io import buffers_to_json, json_writer
from obj_mesh_component import MeshBuffers, Vertex


@pytest.fixture
def triangle():
    return MeshBuffers(
        vertices=[Vertex((0.0, 0.0, 0.0)), Vertex((1.0, 0.0, 0.0)), Vertex((0.0, 1.0, 0.0))],
        indices=[0, 1, 2],
    )


@pytest.fixture
def mixed():
    return MeshBuffers(
        vertices=[Vertex((0.0, 0.0, 0.0), normal=(0.0, 0.0, 1.0)),
                  Vertex((1.0, 0.0, 0.0)),
                  Vertex((0.0, 1.0, 0.0), texcoord=(0.5, 0.5))],
        indices=[0, 1, 2],
    )


def test_format_value_significant_digits():
    assert format_value(0.123456) == "0.12346"
    assert format_value(1.0) == "1"
    assert format_value(-2.5) == "-2.5"
    assert format_value(123456.0) == "1.2346e+05"
    assert format_value(3.14159265, precision=3) == "3.14"


def test_js_array_layout(triangle):
    out = io.StringIO()
    js_array_writer(out, triangle)

    expected = ("let vbo = [\n"
                "    0, 0, 0,\n"
                "    1, 0, 0,\n"
                "    0, 1, 0,\n"
                "];\n\n"
                "let ebo = [\n"
                "    0, 1, 2,\n"
                "];\n\n")
    assert out.getvalue() == expected


def test_js_array_one_row_per_triangle():
    buffers = MeshBuffers(vertices=[Vertex((0.0, 0.0, 0.0))] * 4, indices=[0, 1, 2, 0, 2, 3])
    out = io.StringIO()
    js_array_writer(out, buffers)

    ebo = out.getvalue().split("let ebo = [")[1]
    assert ebo == "\n    0, 1, 2,\n    0, 2, 3,\n];\n\n"


def test_json_uniform(triangle):
    data = buffers_to_json(triangle)

    assert data["stride"] == 3
    assert data["hasTexcoord"] is False
    assert data["hasNormal"] is False
    assert data["vertexCount"] == 3
    assert data["triangleCount"] == 1
    assert data["vbo"] == [0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0, 0.0]
    assert data["ebo"] == [0, 1, 2]
    assert "layout" not in data


def test_json_mixed_layout(mixed):
    data = buffers_to_json(mixed)

    assert data["stride"] is None
    assert data["layout"] == [[False, True], [False, False], [True, False]]
    assert len(data["vbo"]) == 6 + 3 + 5


def test_json_writer_round_trip(triangle):
    out = io.StringIO()
    json_writer(out, triangle, indent=2)
    assert json.loads(out.getvalue()) == buffers_to_json(triangle)


def test_bin_layout():
    buffers = MeshBuffers(
        vertices=[Vertex((0.0, 0.0, 0.0), normal=(0.0, 0.0, 1.0)),
                  Vertex((1.0, 0.0, 0.0), normal=(0.0, 0.0, 1.0)),
                  Vertex((0.0, 1.0, 0.0), normal=(0.0, 0.0, 1.0))],
        indices=[0, 1, 2],
    )
    out = io.BytesIO()
    bin_writer(out, buffers)
    raw = out.getvalue()

    header = np.frombuffer(raw[:16], dtype='<u4')
    assert list(header) == [3, 6, 3, FLAG_NORMAL]

    vbo = np.frombuffer(raw[16:16 + 3 * 6 * 4], dtype='<f4')
    assert vbo[6:12].tolist() == [1.0, 0.0, 0.0, 0.0, 0.0, 1.0]

    ebo = np.frombuffer(raw[16 + 3 * 6 * 4:], dtype='<u4')
    assert ebo.tolist() == [0, 1, 2]


def test_bin_rejects_mixed_layout(mixed):
    with pytest.raises(ValueError):
        bin_writer(io.BytesIO(), mixed)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
