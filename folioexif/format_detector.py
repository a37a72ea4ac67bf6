# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Container format detector

Identifies the outer image container (JPEG, WebP or TIFF) so the right
segment scanner can locate the metadata regions.

Copyright 2025 DNAi inc.
"""

from enum import Enum
from pathlib import PurePath
from typing import Dict, Optional


class ContainerKind(Enum):
    """Outer image containers the extractor can route."""
    JPEG = "JPEG"
    TIFF = "TIFF"
    WEBP = "WEBP"
    UNKNOWN = "UNKNOWN"


class FormatDetector:
    """
    Detects image containers from magic numbers and filename hints.

    Magic numbers always win. The filename extension only matters when
    the signature is inconclusive, which in practice means TIFF: TIFF
    has no container signature of its own beyond the byte-order mark.
    """

    JPEG_SIGNATURE = b'\xff\xd8'
    RIFF_SIGNATURE = b'RIFF'
    WEBP_SIGNATURE = b'WEBP'
    TIFF_BYTE_ORDERS = (b'II', b'MM')

    # Minimum bytes needed to say anything about a buffer
    MIN_LENGTH = 4

    # Extension to container mapping
    EXTENSION_FORMATS: Dict[str, ContainerKind] = {
        '.jpg': ContainerKind.JPEG, '.jpeg': ContainerKind.JPEG,
        '.tif': ContainerKind.TIFF, '.tiff': ContainerKind.TIFF,
        '.webp': ContainerKind.WEBP,
    }

    @classmethod
    def kind_from_filename(cls, filename: Optional[str]) -> Optional[ContainerKind]:
        """
        Map a filename (or bare extension) to a container kind.

        Args:
            filename: File name, path or URL path; may be None

        Returns:
            ContainerKind or None when the extension is unknown
        """
        if not filename:
            return None
        suffix = PurePath(filename).suffix.lower()
        if not suffix and filename.lower() in ('jpg', 'jpeg', 'tif', 'tiff', 'webp'):
            suffix = '.' + filename.lower()
        return cls.EXTENSION_FORMATS.get(suffix)

    @classmethod
    def sniff(cls, data: bytes, filename: Optional[str] = None) -> ContainerKind:
        """
        Detect the container of an image buffer.

        Args:
            data: Image bytes (a prefix is enough)
            filename: Optional filename hint

        Returns:
            The detected ContainerKind, UNKNOWN when nothing matches
        """
        if data is None or len(data) < cls.MIN_LENGTH:
            return ContainerKind.UNKNOWN

        if data[:2] == cls.JPEG_SIGNATURE:
            return ContainerKind.JPEG

        if data[:4] == cls.RIFF_SIGNATURE and data[8:12] == cls.WEBP_SIGNATURE:
            return ContainerKind.WEBP

        # TIFF is selected by hint, or as the last resort for anything that
        # starts with a byte-order mark; the TIFF reader validates the rest
        if cls.kind_from_filename(filename) is ContainerKind.TIFF:
            return ContainerKind.TIFF
        if data[:2] in cls.TIFF_BYTE_ORDERS:
            return ContainerKind.TIFF

        return ContainerKind.UNKNOWN
