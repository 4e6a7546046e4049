"""
OBJ Reader Module

Single pass reader for OBJ text: the v, vt and vn blocks come first, in that
order, followed by face lines. The reader keeps exactly one line of
lookahead; the line that ends one block starts the next phase.
"""

from enum import Enum
from typing import Iterable, Iterator, List, Optional

from obj_errors import (EmptyPositionSet, MalformedAttributeLine,
                        ObjConversionError, UnexpectedEndOfStream)
from obj_interner import VertexInterner
from obj_mesh_component import (EARCUT_SPLIT, FIXED_SPLIT, ConvertOptions,
                                MeshBuffers, ObjAttributes)
from obj_sort import sort_by_position_z_then_x
from obj_tokenize import TokenizeError, tokenize
from obj_tri import (earcut_triangulate_quad, fan_triangulate,
                     parse_descriptor, split_face_line)

POSITION_PREFIX = "v "
TEXCOORD_PREFIX = "vt"
NORMAL_PREFIX = "vn"
FACE_MARKER = "f"


class Phase(Enum):
    POSITIONS = "positions"
    TEXCOORDS = "texcoords"
    NORMALS = "normals"
    FACES = "faces"
    DONE = "done"


class ReaderState:
    """
    Current lookahead line and reading phase over a line iterator.

    Attributes:
        line: Lookahead line, None once the stream is exhausted
        phase: Current phase
        line_number: 1-based number of the lookahead line
    """

    def __init__(self, lines: Iterable[str]):
        self._lines: Iterator[str] = iter(lines)
        self.line: Optional[str] = None
        self.phase = Phase.POSITIONS
        self.line_number = 0
        self.advance()

    @property
    def exhausted(self) -> bool:
        return self.line is None

    def advance(self) -> Optional[str]:
        """Replace the lookahead with the next line, or None at the end."""
        raw = next(self._lines, None)
        if raw is None:
            self.line = None
        else:
            self.line = raw.rstrip()
            self.line_number += 1
        return self.line


def is_skippable(line: str) -> bool:
    """Blank, too short to carry a prefix, or a comment."""
    return len(line) < 2 or line[0] == '#'


def read_attribute_block(state: ReaderState, prefix: str, components: int) -> List[tuple]:
    """
    Read the contiguous block of lines starting with prefix.

    Blank and comment lines are skipped. The first substantive line with a
    different prefix is left as the lookahead; if it comes before any
    matching line the block is empty.

    Args:
        state: Reader state, advanced past the block
        prefix: Two character line prefix, e.g. "v " or "vt"
        components: Number of floats per attribute

    Returns:
        List of attribute tuples

    Raises:
        MalformedAttributeLine: A matching line has too few or bad numbers
    """
    block = []
    while not state.exhausted:
        line = state.line
        if not is_skippable(line):
            if line[:2] != prefix:
                break
            try:
                values = tokenize(line, max_tokens=components, sentinel=None)
            except TokenizeError:
                raise MalformedAttributeLine(line, line_number=state.line_number) from None
            if len(values) < components or None in values:
                raise MalformedAttributeLine(line, line_number=state.line_number)
            block.append(tuple(values))
        state.advance()
    return block


def read_attributes(state: ReaderState) -> ObjAttributes:
    """
    Read the position, texcoord and normal blocks.

    Raises:
        MalformedAttributeLine: An attribute line failed to parse
        EmptyPositionSet: No positions were found
        UnexpectedEndOfStream: The stream ended before the face data
    """
    attributes = ObjAttributes()

    attributes.positions = read_attribute_block(state, POSITION_PREFIX, 3)
    if not attributes.positions:
        raise EmptyPositionSet()
    if state.exhausted:
        raise UnexpectedEndOfStream("after vertex positions")

    state.phase = Phase.TEXCOORDS
    attributes.texcoords = read_attribute_block(state, TEXCOORD_PREFIX, 2)
    if state.exhausted:
        raise UnexpectedEndOfStream("after texture coordinates")

    state.phase = Phase.NORMALS
    attributes.normals = read_attribute_block(state, NORMAL_PREFIX, 3)
    if state.exhausted:
        raise UnexpectedEndOfStream("after vertex normals")

    state.phase = Phase.FACES
    return attributes


def triangulate_face_line(line: str, interner: VertexInterner,
                          quad_split: str = FIXED_SPLIT) -> List[str]:
    """Split a face line and return its triangle corners."""
    descriptors = split_face_line(line)
    if quad_split != EARCUT_SPLIT or len(descriptors) != 4:
        return fan_triangulate(descriptors)

    # Out of range positions are reported by the interner afterwards
    positions = interner.attributes.positions
    points = []
    for text in descriptors:
        p = parse_descriptor(text)[0]
        if not 1 <= p <= len(positions):
            return fan_triangulate(descriptors)
        points.append(positions[p - 1])
    return earcut_triangulate_quad(descriptors, points)


def read_faces(state: ReaderState, interner: VertexInterner,
               quad_split: str = FIXED_SPLIT) -> int:
    """
    Scan face lines to the end of the stream, interning every corner.

    Every substantive line starting with "f" is a face; one that does not
    split into 3 or 4 space separated vertices ("f\\t1\\t2\\t3", "f1 2 3")
    fails. Other lines are skipped.

    Returns:
        Number of face lines read

    Raises:
        ObjConversionError: A face is malformed, with the line number set
    """
    face_count = 0
    while not state.exhausted:
        line = state.line
        if not is_skippable(line) and line[0] == FACE_MARKER:
            try:
                interner.add_all(triangulate_face_line(line, interner, quad_split))
            except ObjConversionError as e:
                if e.line_number is None:
                    e.line_number = state.line_number
                raise
            face_count += 1
        state.advance()
    state.phase = Phase.DONE
    return face_count


def obj_to_buffers(lines: Iterable[str], options: Optional[ConvertOptions] = None) -> MeshBuffers:
    """
    Convert OBJ text into a vertex buffer and a triangle index buffer.

    Args:
        lines: OBJ lines, e.g. an open text file
        options: Conversion settings, defaults when None

    Returns:
        MeshBuffers with deduplicated vertices and triangle indices

    Raises:
        ObjConversionError: The input is malformed; nothing is returned
    """
    if options is None:
        options = ConvertOptions()

    state = ReaderState(lines)
    attributes = read_attributes(state)

    interner = VertexInterner(attributes,
                              disable_texture=options.disable_texture,
                              disable_normal=options.disable_normal,
                              cache_key=options.cache_key)
    read_faces(state, interner, options.quad_split)

    buffers = interner.buffers
    if options.sort_by_position_z_then_x:
        buffers = sort_by_position_z_then_x(buffers, options.sort_tolerance)
    return buffers
