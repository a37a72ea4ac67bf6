# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Core metadata extraction

``extract_metadata`` is the single entry point every caller uses: manifest
writers, caption resolution and the command-line tool. It routes the
buffer to the right segment scanner, decodes each metadata region and
assembles the result.

Extraction is best-effort. Truncated prefixes, malformed headers and
nonstandard files all degrade to a smaller result; nothing raises past
this module's ``extract_metadata``.

Copyright 2025 DNAi inc.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

from folioexif import jpeg_parser, webp_parser
from folioexif.config import DEFAULT_CONFIG, ExtractorConfig
from folioexif.exceptions import FolioExifError, MetadataReadError, UnsupportedFormatError
from folioexif.exif_parser import ExifParser
from folioexif.format_detector import ContainerKind, FormatDetector
from folioexif.iptc_parser import IPTCParser, IPTCResult
from folioexif.metadata import Metadata
from folioexif.metadata_normalizer import assemble
from folioexif.raw_buffer import REGION_IPTC, REGION_TIFF, BufferRegion, RawBuffer

logger = logging.getLogger(__name__)


def _locate_regions(buffer: RawBuffer, kind: ContainerKind) -> Iterable[BufferRegion]:
    if kind is ContainerKind.JPEG:
        return jpeg_parser.iterate_segments(buffer)
    if kind is ContainerKind.WEBP:
        return webp_parser.iterate_segments(buffer)
    if kind is ContainerKind.TIFF:
        return [BufferRegion(REGION_TIFF, 0, len(buffer))]
    raise UnsupportedFormatError(f"Unrecognized container ({len(buffer)} bytes)")


def _merge_iptc(target: IPTCResult, found: IPTCResult) -> None:
    if target.caption is None:
        target.caption = found.caption
    target.keywords.extend(found.keywords)
    if target.location is None:
        target.location = found.location


def _extract(data: bytes, filename: Optional[str], config: ExtractorConfig) -> Metadata:
    buffer = RawBuffer(data)
    kind = FormatDetector.sniff(buffer.data, filename)
    logger.debug("Detected %s container for %s", kind.value, filename or '<buffer>')

    exif_parser = ExifParser(buffer, config)
    iptc_parser = IPTCParser(buffer, config)
    tags: Dict[int, Any] = {}
    gps_tags: Dict[int, Any] = {}
    iptc = IPTCResult()

    # Earlier regions win on conflicting tags
    for region in _locate_regions(buffer, kind):
        if region.kind == REGION_TIFF:
            parsed = exif_parser.parse_tiff(region.start, region.end)
            if parsed is None:
                continue
            for tag_id, value in parsed.tags.items():
                tags.setdefault(tag_id, value)
            for tag_id, value in parsed.gps_tags.items():
                gps_tags.setdefault(tag_id, value)
        elif region.kind == REGION_IPTC:
            _merge_iptc(iptc, iptc_parser.parse(region.start, region.length))

    return assemble(tags, gps_tags, iptc, config)


def extract_metadata(
    data: Optional[bytes],
    filename: Optional[str] = None,
    config: Optional[ExtractorConfig] = None,
) -> Metadata:
    """
    Extract date, caption, keywords and location from image bytes.

    Args:
        data: Image bytes; a prefix (typically the first 64 KiB) is enough
        filename: Optional filename or extension, used only when the
            container signature is inconclusive
        config: Extraction limits and priorities

    Returns:
        Metadata; all fields are None/empty when nothing could be decoded

    Example:
        >>> meta = extract_metadata(Path('shoot/IMG_0001.jpg').read_bytes()[:65536])
        >>> meta.date
        '2024-08-29T20:15:00Z'
    """
    config = config or DEFAULT_CONFIG
    if not data:
        return Metadata.empty()
    try:
        return _extract(data, filename, config)
    except UnsupportedFormatError as exc:
        logger.debug("No metadata extracted: %s", exc)
    except FolioExifError as exc:
        logger.debug("Metadata extraction failed for %s: %s", filename or '<buffer>', exc)
    except Exception:
        # Last line of the fail-soft boundary; the stages handle expected errors
        logger.debug("Unexpected error extracting metadata from %s", filename or '<buffer>', exc_info=True)
    return Metadata.empty()


def read_prefix(file_path: Union[str, Path], max_bytes: Optional[int] = None) -> bytes:
    """
    Read the first ``max_bytes`` of a file.

    Raises:
        MetadataReadError: If the file cannot be opened or read
    """
    limit = max_bytes if max_bytes is not None else DEFAULT_CONFIG.max_prefix_bytes
    try:
        with open(file_path, 'rb') as f:
            return f.read(limit)
    except OSError as exc:
        raise MetadataReadError(f"Cannot read {file_path}: {exc}") from exc


def read_metadata(file_path: Union[str, Path], config: Optional[ExtractorConfig] = None) -> Metadata:
    """
    Extract metadata from the head of a local image file.

    Args:
        file_path: Path to the image file
        config: Extraction limits; ``max_prefix_bytes`` bounds the read

    Returns:
        Metadata for the file

    Raises:
        MetadataReadError: If the file cannot be read
    """
    config = config or DEFAULT_CONFIG
    data = read_prefix(file_path, config.max_prefix_bytes)
    return extract_metadata(data, filename=Path(file_path).name, config=config)
