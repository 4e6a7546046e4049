#!/usr/bin/env python3
"""
OBJ to Array Converter

Reads an OBJ file (or stdin) and writes its triangulated, deduplicated
vertex and index buffers (to a file or stdout) as JavaScript arrays, JSON or
raw binary.

Usage:
    obj-to-array model.obj model.js --no-normal
    obj-to-array model.obj model.bin --format bin --sort
    cat model.obj | obj-to-array --format json
"""

import argparse
import io
import sys
import time
from typing import Optional

from bin_io import bin_writer
from js_io import js_array_writer
from json_io import json_writer
from obj_mesh_component import (CANONICAL_KEYS, EARCUT_SPLIT, FIXED_SPLIT,
                                LITERAL_KEYS, ConvertOptions, MeshBuffers)
from obj_reader import obj_to_buffers

FORMATS = ("js", "json", "bin")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="obj-to-array",
        description="Convert an OBJ mesh into interleaved vertex and index buffers.")
    parser.add_argument("input", nargs="?", default=None,
                        help="OBJ file to read (default: stdin)")
    parser.add_argument("output", nargs="?", default=None,
                        help="File to write (default: stdout)")
    parser.add_argument("--no-texture", action="store_true",
                        help="Drop texture coordinates")
    parser.add_argument("--no-normal", action="store_true",
                        help="Drop vertex normals")
    parser.add_argument("--sort", action="store_true",
                        help="Sort vertices by position z, then x")
    parser.add_argument("--sort-tolerance", type=float, default=1e-10,
                        help="Absolute tolerance under which z values tie (default: 1e-10)")
    parser.add_argument("--quad-split", choices=(FIXED_SPLIT, EARCUT_SPLIT), default=FIXED_SPLIT,
                        help="Quad triangulation: fixed diagonal or earcut (default: fixed)")
    parser.add_argument("--literal-keys", action="store_true",
                        help="Deduplicate vertices by descriptor text instead of index triple")
    parser.add_argument("--format", choices=FORMATS, default="js",
                        help="Output format (default: js)")
    parser.add_argument("--precision", type=int, default=5,
                        help="Significant digits for js output (default: 5)")
    parser.add_argument("--indent", type=int, default=None,
                        help="Indentation for json output")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Print a summary to stderr")
    return parser


def options_from_args(args: argparse.Namespace) -> ConvertOptions:
    return ConvertOptions(
        disable_texture=args.no_texture,
        disable_normal=args.no_normal,
        sort_by_position_z_then_x=args.sort,
        sort_tolerance=args.sort_tolerance,
        quad_split=args.quad_split,
        cache_key=LITERAL_KEYS if args.literal_keys else CANONICAL_KEYS,
    )


def render(buffers: MeshBuffers, fmt: str, precision: int = 5, indent: Optional[int] = None):
    """Render buffers to str (js, json) or bytes (bin)."""
    if fmt == "bin":
        out = io.BytesIO()
        bin_writer(out, buffers)
    else:
        out = io.StringIO()
        if fmt == "json":
            json_writer(out, buffers, indent=indent)
        else:
            js_array_writer(out, buffers, precision=precision)
    return out.getvalue()


def convert(args: argparse.Namespace) -> MeshBuffers:
    """Read the input named by args and convert it."""
    options = options_from_args(args)
    if args.input is None:
        return obj_to_buffers(sys.stdin, options)
    with open(args.input, 'r') as obj_in:
        return obj_to_buffers(obj_in, options)


def write_output(data, output: Optional[str] = None):
    if output is None:
        if isinstance(data, bytes):
            sys.stdout.buffer.write(data)
            sys.stdout.buffer.flush()
        else:
            sys.stdout.write(data)
        return
    mode = 'wb' if isinstance(data, bytes) else 'w'
    with open(output, mode) as out:
        out.write(data)


def print_summary(buffers: MeshBuffers, args: argparse.Namespace, time_elapsed: float):
    stride = buffers.stride
    print("=" * 60, file=sys.stderr)
    print(f"Input:               {args.input or '<stdin>'}", file=sys.stderr)
    print(f"Output:              {args.output or '<stdout>'} ({args.format})", file=sys.stderr)
    print(f"Vertices:            {len(buffers.vertices)}", file=sys.stderr)
    print(f"Triangles:           {buffers.triangle_count}", file=sys.stderr)
    print(f"Stride:              {stride if stride is not None else 'mixed'}", file=sys.stderr)
    print(f"Sorted:              {args.sort}", file=sys.stderr)
    print(f"Time elapsed:        {time_elapsed:.3f} seconds", file=sys.stderr)
    print("=" * 60, file=sys.stderr)


def main(argv=None) -> int:
    """Main program entry point."""
    args = build_parser().parse_args(argv)
    time_start = time.time()

    try:
        buffers = convert(args)
        data = render(buffers, args.format, args.precision, args.indent)
    except ValueError as e:
        # ObjConversionError and invalid option values
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Could not open file {e.filename}: {e.strerror}", file=sys.stderr)
        return 1

    try:
        write_output(data, args.output)
    except OSError as e:
        print(f"Could not open file {e.filename}: {e.strerror}", file=sys.stderr)
        return 1

    if args.verbose:
        print_summary(buffers, args, time.time() - time_start)
    return 0


if __name__ == "__main__":
    sys.exit(main())
