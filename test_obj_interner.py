"""
Unit tests for VertexInterner
Tests deduplication, cache key strategies, disable flags and bounds checks
"""

import pytest

from obj_errors import MalformedVertexDescriptor, OutOfRangeReference
from obj_interner import VertexInterner
from obj_mesh_component import LITERAL_KEYS, ObjAttributes, Vertex


@pytest.fixture
def attributes():
    return ObjAttributes(
        positions=[(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 1.0, 0.0)],
        texcoords=[(0.0, 0.0), (1.0, 0.0)],
        normals=[(0.0, 0.0, 1.0)],
    )


def test_new_descriptors_get_consecutive_slots(attributes):
    interner = VertexInterner(attributes)
    for text in ["1", "2", "3"]:
        interner.add(text)

    assert interner.buffers.indices == [0, 1, 2]
    assert interner.buffers.vertices[1] == Vertex((1.0, 0.0, 0.0))


def test_repeated_descriptor_reuses_slot(attributes):
    """The same descriptor in two faces maps to one vertex"""
    interner = VertexInterner(attributes)
    interner.add_all(["1/1/1", "2/2/1", "3/1/1"])
    interner.add_all(["1/1/1", "3/1/1", "4/2/1"])

    assert len(interner.buffers.vertices) == 4
    assert interner.buffers.indices == [0, 1, 2, 0, 2, 3]


def test_resolves_all_attributes(attributes):
    interner = VertexInterner(attributes)
    interner.add("2/2/1")
    vertex = interner.buffers.vertices[0]

    assert vertex.position == (1.0, 0.0, 0.0)
    assert vertex.texcoord == (1.0, 0.0)
    assert vertex.normal == (0.0, 0.0, 1.0)
    assert vertex.stride == 8
    assert vertex.values() == [1.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0]


def test_missing_texcoord(attributes):
    interner = VertexInterner(attributes)
    interner.add("3//1")
    vertex = interner.buffers.vertices[0]

    assert not vertex.has_texcoord
    assert vertex.has_normal
    assert vertex.stride == 6


def test_canonical_keys_merge_equivalent_spellings(attributes):
    """"1//1" and "1/0/1" reference the same attributes"""
    interner = VertexInterner(attributes)
    interner.add("1//1")
    interner.add("1/0/1")

    assert len(interner.buffers.vertices) == 1
    assert interner.buffers.indices == [0, 0]


def test_literal_keys_keep_spellings_apart(attributes):
    interner = VertexInterner(attributes, cache_key=LITERAL_KEYS)
    interner.add("1//1")
    interner.add("1/0/1")
    interner.add("1//1")

    assert len(interner.buffers.vertices) == 2
    assert interner.buffers.indices == [0, 1, 0]
    assert interner.buffers.vertices[0] == interner.buffers.vertices[1]


def test_disable_texture_drops_texcoords(attributes):
    interner = VertexInterner(attributes, disable_texture=True)
    interner.add("1/1/1")
    interner.add("1/2/1")

    assert len(interner.buffers.vertices) == 1, "Disabled texcoords should not split vertices"
    vertex = interner.buffers.vertices[0]
    assert vertex.texcoord is None
    assert vertex.normal == (0.0, 0.0, 1.0)


def test_disable_normal_drops_normals(attributes):
    interner = VertexInterner(attributes, disable_normal=True)
    interner.add("1/1/1")

    vertex = interner.buffers.vertices[0]
    assert vertex.normal is None
    assert vertex.stride == 5


def test_disabled_attribute_is_not_bounds_checked(attributes):
    interner = VertexInterner(attributes, disable_texture=True)
    interner.add("1/99/1")
    assert interner.buffers.indices == [0]


@pytest.mark.parametrize("text, kind, index", [
    ("5", "position", 5),
    ("0/1", "position", 0),
    ("-1", "position", -1),
    ("1/3", "texcoord", 3),
    ("1/1/2", "normal", 2),
    ("1/-2/1", "texcoord", -2),
])
def test_out_of_range_reference(attributes, text, kind, index):
    interner = VertexInterner(attributes)
    with pytest.raises(OutOfRangeReference) as excinfo:
        interner.add(text)

    assert excinfo.value.kind == kind
    assert excinfo.value.index == index
    assert excinfo.value.text == text
    assert interner.buffers.vertices == [], "No vertex should be created"
    assert interner.buffers.indices == [], "No index should be emitted"


def test_malformed_descriptor(attributes):
    interner = VertexInterner(attributes, cache_key=LITERAL_KEYS)
    with pytest.raises(MalformedVertexDescriptor):
        interner.add("1/x/1")


def test_indices_always_in_bounds(attributes):
    interner = VertexInterner(attributes)
    for text in ["1", "2", "3", "1", "3", "4", "4", "2", "1/1", "1/2", "1/1"]:
        index = interner.add(text)
        assert index < len(interner.buffers.vertices)
    assert all(i < len(interner.buffers.vertices) for i in interner.buffers.indices)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
