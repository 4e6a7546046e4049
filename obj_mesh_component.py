"""
OBJ Mesh Component Data Structures

This module provides the data structures shared by the OBJ reader, the
vertex interner, the spatial sorter and the buffer writers.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

Position = Tuple[float, float, float]
Texcoord = Tuple[float, float]
Normal = Tuple[float, float, float]

CANONICAL_KEYS = "canonical"
LITERAL_KEYS = "literal"
FIXED_SPLIT = "fixed"
EARCUT_SPLIT = "earcut"


@dataclass(frozen=True)
class Vertex:
    """One interleaved vertex: a position plus optional texcoord and normal."""
    position: Position
    texcoord: Optional[Texcoord] = None
    normal: Optional[Normal] = None

    @property
    def has_texcoord(self) -> bool:
        return self.texcoord is not None

    @property
    def has_normal(self) -> bool:
        return self.normal is not None

    @property
    def stride(self) -> int:
        """Number of floats this vertex contributes to the vertex buffer."""
        return 3 + 2 * self.has_texcoord + 3 * self.has_normal

    def values(self) -> List[float]:
        """Flatten to the interleaved row: position, texcoord, normal."""
        row = list(self.position)
        if self.texcoord is not None:
            row.extend(self.texcoord)
        if self.normal is not None:
            row.extend(self.normal)
        return row


@dataclass
class ObjAttributes:
    """
    Attribute arrays read from the leading v/vt/vn blocks.

    Descriptors reference these 1-based; 0 means the reference is absent.
    """
    positions: List[Position] = field(default_factory=list)
    texcoords: List[Texcoord] = field(default_factory=list)
    normals: List[Normal] = field(default_factory=list)


@dataclass
class MeshBuffers:
    """
    Deduplicated vertex buffer with a triangle index buffer.

    Attributes:
        vertices: Unique vertices in first-seen order
        indices: Three indices per triangle, each < len(vertices)
    """
    vertices: List[Vertex] = field(default_factory=list)
    indices: List[int] = field(default_factory=list)

    @property
    def is_uniform(self) -> bool:
        """True if every vertex carries the same attributes."""
        if not self.vertices:
            return True
        first = self.vertices[0]
        return all(v.has_texcoord == first.has_texcoord and
                   v.has_normal == first.has_normal for v in self.vertices)

    @property
    def stride(self) -> Optional[int]:
        """Common vertex stride, or None when attribute layouts differ."""
        if not self.vertices:
            return 3
        if not self.is_uniform:
            return None
        return self.vertices[0].stride

    @property
    def triangle_count(self) -> int:
        return len(self.indices) // 3

    def vertex_data(self, dtype=np.float64) -> np.ndarray:
        """Flat interleaved vertex buffer."""
        data = [value for vertex in self.vertices for value in vertex.values()]
        return np.array(data, dtype=dtype)

    def index_data(self, dtype=np.uint32) -> np.ndarray:
        """Flat index buffer."""
        return np.array(self.indices, dtype=dtype)


@dataclass
class ConvertOptions:
    """
    Conversion settings.

    Attributes:
        disable_texture: Drop texcoords even when descriptors reference them
        disable_normal: Drop normals even when descriptors reference them
        sort_by_position_z_then_x: Reorder vertices by position z, then x
        sort_tolerance: Absolute tolerance under which z values tie
        quad_split: "fixed" diagonal (a,b,c),(a,c,d) or "earcut"
        cache_key: "canonical" (p, t, n) triple or "literal" descriptor text
    """
    disable_texture: bool = False
    disable_normal: bool = False
    sort_by_position_z_then_x: bool = False
    sort_tolerance: float = 1e-10
    quad_split: str = FIXED_SPLIT
    cache_key: str = CANONICAL_KEYS

    def __post_init__(self):
        if self.quad_split not in (FIXED_SPLIT, EARCUT_SPLIT):
            raise ValueError(f"Unknown quad split: {self.quad_split}")
        if self.cache_key not in (CANONICAL_KEYS, LITERAL_KEYS):
            raise ValueError(f"Unknown cache key: {self.cache_key}")
        if self.sort_tolerance < 0:
            raise ValueError(f"Sort tolerance must be non-negative: {self.sort_tolerance}")
