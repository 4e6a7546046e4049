"""
Vertex Interning Module

Assigns one vertex buffer slot to each distinct face vertex and appends the
slot index for every occurrence. Repeats are served from a cache.

Two cache keys are supported:
- canonical: the effective (p, t, n) triple after the disable flags, so
  "1/0/2" and "1//2" share a slot
- literal: the raw descriptor text, so those two spellings stay distinct
"""

from typing import Dict, Hashable, Iterable, Optional, Sequence

from obj_errors import OutOfRangeReference
from obj_mesh_component import (CANONICAL_KEYS, LITERAL_KEYS, MeshBuffers,
                                ObjAttributes, Vertex)
from obj_tri import Descriptor, parse_descriptor


def _resolve(array: Sequence, location: int, text: str, kind: str):
    if location < 1 or location > len(array):
        raise OutOfRangeReference(text, kind, location)
    return array[location - 1]


class VertexInterner:
    """
    Builds a deduplicated MeshBuffers from face vertex descriptors.

    Attributes:
        attributes: Position/texcoord/normal arrays, read-only here
        buffers: Vertex and index buffers being built
        cache: Descriptor key -> vertex buffer slot
    """

    def __init__(self, attributes: ObjAttributes,
                 disable_texture: bool = False,
                 disable_normal: bool = False,
                 cache_key: str = CANONICAL_KEYS,
                 buffers: Optional[MeshBuffers] = None):
        self.attributes = attributes
        self.disable_texture = disable_texture
        self.disable_normal = disable_normal
        self.cache_key = cache_key
        self.buffers = buffers if buffers is not None else MeshBuffers()
        self.cache: Dict[Hashable, int] = {}

    def effective(self, location: Descriptor) -> Descriptor:
        """Drop texcoord/normal references that are disabled."""
        p, t, n = location
        return (p,
                0 if self.disable_texture else t,
                0 if self.disable_normal else n)

    def add(self, text: str) -> int:
        """
        Append the buffer index for one face vertex descriptor.

        Args:
            text: Descriptor such as "3", "3/1", "3//2" or "3/1/2"

        Returns:
            The vertex buffer slot used for this descriptor
        """
        if self.cache_key == LITERAL_KEYS:
            index = self.cache.get(text)
            if index is None:
                index = self._insert(text, self.effective(parse_descriptor(text)))
                self.cache[text] = index
        else:
            key = self.effective(parse_descriptor(text))
            index = self.cache.get(key)
            if index is None:
                index = self._insert(text, key)
                self.cache[key] = index

        self.buffers.indices.append(index)
        return index

    def add_all(self, corners: Iterable[str]):
        """Intern every triangle corner of a triangulated face."""
        for text in corners:
            self.add(text)

    def _insert(self, text: str, location: Descriptor) -> int:
        p, t, n = location
        position = _resolve(self.attributes.positions, p, text, "position")
        texcoord = _resolve(self.attributes.texcoords, t, text, "texcoord") if t else None
        normal = _resolve(self.attributes.normals, n, text, "normal") if n else None

        index = len(self.buffers.vertices)
        self.buffers.vertices.append(Vertex(position, texcoord, normal))
        return index
