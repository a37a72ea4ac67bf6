# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Command-line interface for FolioExif

Prints the date, caption, keywords and location of image files, reading
only the head of each file the way the gallery tooling does.

Copyright 2025 DNAi inc.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from folioexif import __version__
from folioexif.caption_system import load_manifest, resolve_caption
from folioexif.config import DEFAULT_CONFIG, ExtractorConfig
from folioexif.exceptions import FolioExifError
from folioexif.metadata_utils import batch_read_metadata


def format_output(results: Dict[str, Dict[str, Any]], format_type: str = "text") -> str:
    """
    Format per-file metadata for printing.

    Args:
        results: Mapping of file name to metadata dictionary
        format_type: Output format ('text' or 'json')

    Returns:
        Formatted output string
    """
    if format_type == "json":
        return json.dumps(results, indent=2, ensure_ascii=False)

    lines = []
    for name, fields in results.items():
        if len(results) > 1:
            lines.append(f"======== {name}")
        for key, value in fields.items():
            if isinstance(value, list):
                value = ', '.join(str(item) for item in value)
            elif isinstance(value, dict):
                value = ', '.join(f"{k}={v}" for k, v in value.items())
            lines.append(f"{key:<14}: {'' if value is None else value}")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='folioexif',
        description="FolioExif - Extract capture date, caption, keywords and location from images",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Read metadata
  folioexif photo.jpg

  # JSON output for several files
  folioexif -j shoot/*.jpg

  # Resolve gallery captions against a manifest
  folioexif --manifest shoot/manifest.json shoot/*.jpg
        """
    )
    parser.add_argument('files', nargs='+', help='Image file(s) to read')
    parser.add_argument('-j', '--json', action='store_true', help='Output metadata in JSON format')
    parser.add_argument('-b', '--bytes', type=int, default=DEFAULT_CONFIG.max_prefix_bytes,
                        help='Bytes read from the start of each file (default: %(default)s)')
    parser.add_argument('-m', '--manifest', type=Path,
                        help='Manifest JSON of per-file overrides; output resolved gallery captions')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log parser diagnostics')
    parser.add_argument('-V', '--version', action='version', version=f'folioexif {__version__}')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    if args.bytes <= 0:
        print("Error: --bytes must be positive", file=sys.stderr)
        return 2

    config = ExtractorConfig(max_prefix_bytes=args.bytes)
    manifest = load_manifest(args.manifest) if args.manifest else None

    failures: List[str] = []

    def on_error(path: Path, error: Exception) -> None:
        failures.append(str(path))
        print(f"Error: {error}", file=sys.stderr)

    try:
        metadata = batch_read_metadata(args.files, config=config, error_handler=on_error)
    except FolioExifError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    results: Dict[str, Dict[str, Any]] = {}
    for path, meta in metadata.items():
        if args.manifest:
            results[str(path)] = resolve_caption(path.name, meta, manifest).to_dict()
        else:
            results[str(path)] = meta.to_dict()

    if results:
        print(format_output(results, "json" if args.json else "text"))
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
