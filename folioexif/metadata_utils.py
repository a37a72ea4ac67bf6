# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Metadata utility functions for common operations.

Helpers for manifest builders that process whole folders: a quick check
for metadata markers and batch extraction over many files.

Copyright 2025 DNAi inc.
"""

from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from folioexif.config import DEFAULT_CONFIG, ExtractorConfig
from folioexif.core import read_metadata, read_prefix
from folioexif.exceptions import MetadataReadError
from folioexif.format_detector import ContainerKind, FormatDetector
from folioexif.metadata import Metadata


def has_metadata(file_path: Union[str, Path], config: Optional[ExtractorConfig] = None) -> bool:
    """
    Quickly check if a file has metadata without fully parsing it.

    Only the file header is read, and only the markers are looked for:
    an APP1 ``Exif`` or APP13 segment in JPEG, an ``EXIF`` chunk in WebP,
    or any TIFF header.

    Args:
        file_path: Path to the file to check
        config: Extraction limits; ``max_prefix_bytes`` bounds the read

    Returns:
        True if file appears to have metadata, False otherwise
    """
    config = config or DEFAULT_CONFIG
    try:
        header = read_prefix(file_path, config.max_prefix_bytes)
    except MetadataReadError:
        return False

    kind = FormatDetector.sniff(header, Path(file_path).name)
    if kind is ContainerKind.JPEG:
        exif_pos = header.find(b'\xff\xe1')
        if exif_pos >= 0 and b'Exif' in header[exif_pos:exif_pos + 10]:
            return True
        return b'\xff\xed' in header
    if kind is ContainerKind.WEBP:
        return b'EXIF' in header[12:]
    if kind is ContainerKind.TIFF:
        return header[:4] in (b'II*\x00', b'MM\x00*')
    return False


def batch_read_metadata(
    file_paths: List[Union[str, Path]],
    config: Optional[ExtractorConfig] = None,
    error_handler: Optional[Callable[[Path, Exception], None]] = None,
    skip_no_metadata: bool = False,
) -> Dict[Path, Metadata]:
    """
    Read metadata from multiple files in order.

    Args:
        file_paths: List of file paths to read
        config: Extraction limits shared by every file
        error_handler: Optional callback for unreadable files (path, exception);
            without one, unreadable files map to empty Metadata
        skip_no_metadata: If True, skip files that don't have metadata markers

    Returns:
        Dictionary mapping file paths to Metadata

    Example:
        >>> results = batch_read_metadata(['a.jpg', 'b.webp'])
        >>> results[Path('a.jpg')].date
        '2024-08-29T20:15:00Z'
    """
    results: Dict[Path, Metadata] = {}

    for file_path in file_paths:
        path = Path(file_path)

        if skip_no_metadata and not has_metadata(path, config):
            continue

        try:
            results[path] = read_metadata(path, config)
        except MetadataReadError as e:
            if error_handler:
                error_handler(path, e)
            else:
                results[path] = Metadata.empty()

    return results
