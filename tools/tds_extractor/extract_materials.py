#!/usr/bin/env python3
"""List materials and texture maps in 3DS scene files.

Usage:
    python extract_materials.py <input> [--json] [--gltf] [-o <output>] [-v]

Examples:
    # Print a material summary for a single file
    python extract_materials.py tower.3ds

    # Dump the parsed chunk tree as JSON
    python extract_materials.py tower.3ds --json

    # Write a glTF material library for every 3DS file in a directory
    python extract_materials.py ./scenes/ --gltf -o ./output
"""
import argparse
import json
import logging
import os
import sys
from pathlib import Path

from gltf_exporter import GLTFExporter
from tds_parser import parse_file
from tds_types import Root

logger = logging.getLogger(__name__)


def find_inputs(input_path: Path):
    """Collect 3DS files from a file or directory path."""
    if input_path.is_file():
        return [input_path]
    return sorted(p for p in input_path.glob("**/*") if p.is_file() and p.suffix.lower() == ".3ds")


def gltf_output_path(tds_file: Path, input_path: Path, output_dir: Path) -> Path:
    """Output path for a file, keeping its place under an input directory."""
    if input_path.is_dir():
        return (output_dir / tds_file.relative_to(input_path)).with_suffix(".gltf")
    return output_dir / f"{tds_file.stem}.gltf"


def print_summary(path: Path, root: Root):
    materials = root.materials
    print(f"File: {path}")
    print(f"Editors: {len(root.editors)}")
    print(f"Materials: {len(materials)}")
    for i, material in enumerate(materials):
        maps = [m.name for m in material.texture_maps if m.name]
        suffix = f" -> {', '.join(maps)}" if maps else ""
        print(f"  [{i}] {material.name or '<unnamed>'}{suffix}")


def main():
    parser = argparse.ArgumentParser(
        description="List materials and texture maps in 3DS scene files"
    )
    parser.add_argument(
        "input",
        help="Input 3DS file or directory containing 3DS files",
    )
    parser.add_argument(
        "-o", "--output",
        default="./output",
        help="Output directory for glTF files (default: ./output)",
    )
    parser.add_argument(
        "--gltf",
        action="store_true",
        help="Write a glTF material library per input file",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the parsed chunk tree as JSON",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every visited chunk",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Input not found: {args.input}", file=sys.stderr)
        return 1

    files = find_inputs(input_path)
    logger.debug("found %d 3DS files under %s", len(files), input_path)
    if not files:
        print(f"No 3DS files found in {input_path}", file=sys.stderr)
        return 1

    if args.gltf:
        os.makedirs(args.output, exist_ok=True)

    success_count = 0
    fail_count = 0
    trees = {}

    for tds_file in files:
        try:
            root = parse_file(tds_file)

            if args.gltf:
                output_file = gltf_output_path(tds_file, input_path, Path(args.output))
                output_file.parent.mkdir(parents=True, exist_ok=True)
                GLTFExporter(root).export(str(output_file))
                if args.verbose and not args.json:
                    print(f"Exported: {tds_file} -> {output_file}")

            if args.json:
                trees[str(tds_file)] = root.to_dict()
            else:
                print_summary(tds_file, root)
            success_count += 1
        except (OSError, ValueError) as e:
            logger.debug("failed to process %s", tds_file, exc_info=True)
            print(f"Failed: {tds_file} - {e}", file=sys.stderr)
            fail_count += 1

    if args.json:
        print(json.dumps(trees, indent=2))
    else:
        total = success_count + fail_count
        print(f"\nParsed {success_count}/{total} files")

    return 0 if fail_count == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
