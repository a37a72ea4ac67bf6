# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
FolioExif - Pure Python image metadata extraction for photo portfolios

Reads capture dates, captions, keywords and GPS coordinates from the
EXIF and IPTC metadata of JPEG, TIFF and WebP images. Parsing works
directly on the binary structures, so a partial-range fetch of the first
64 KiB of an image is enough.

Copyright 2025 DNAi inc.
"""

__version__ = "0.1.0"
__author__ = "DNAi inc."

from folioexif.core import extract_metadata, read_metadata
from folioexif.config import DEFAULT_CONFIG, ExtractorConfig
from folioexif.exceptions import FolioExifError, MetadataReadError
from folioexif.format_detector import ContainerKind, FormatDetector
from folioexif.metadata import GPSLocation, Metadata, PlaceLocation
from folioexif.caption_system import (
    CaptionResult,
    format_display_date,
    generate_title_from_filename,
    load_manifest,
    resolve_caption,
)
from folioexif.metadata_utils import batch_read_metadata, has_metadata

__all__ = [
    "extract_metadata",
    "read_metadata",
    "DEFAULT_CONFIG",
    "ExtractorConfig",
    "FolioExifError",
    "MetadataReadError",
    "ContainerKind",
    "FormatDetector",
    "GPSLocation",
    "Metadata",
    "PlaceLocation",
    "CaptionResult",
    "format_display_date",
    "generate_title_from_filename",
    "load_manifest",
    "resolve_caption",
    "batch_read_metadata",
    "has_metadata",
]
