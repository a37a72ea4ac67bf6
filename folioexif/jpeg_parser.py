# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
JPEG segment scanner

Walks the marker segments at the head of a JPEG file and reports where
the EXIF (APP1) and IPTC (APP13) payloads live. The walk stops at the
Start-Of-Scan marker: entropy-coded image data follows and carries no
further metadata segments.

Copyright 2025 DNAi inc.
"""

import logging
from typing import Iterator

from folioexif.exceptions import MetadataReadError
from folioexif.raw_buffer import REGION_IPTC, REGION_TIFF, BufferRegion, RawBuffer

logger = logging.getLogger(__name__)

SOI = 0xFFD8
EOI = 0xFFD9
SOS = 0xFFDA
APP1 = 0xFFE1
APP13 = 0xFFED
TEM = 0xFF01

EXIF_HEADER = b'Exif\x00\x00'


def _has_no_payload(marker: int) -> bool:
    """SOI, EOI, TEM and the RSTn markers are bare two-byte markers."""
    return marker in (SOI, EOI, TEM) or 0xFFD0 <= marker <= 0xFFD7


def iterate_segments(buffer: RawBuffer) -> Iterator[BufferRegion]:
    """
    Yield the EXIF and IPTC regions of a JPEG buffer in file order.

    EXIF regions start at the TIFF header (six bytes into the APP1
    payload). IPTC regions cover the whole APP13 payload. A truncated or
    malformed segment ends the walk; regions already yielded stay valid,
    and a region cut short by the end of the buffer is clamped rather
    than dropped.

    Args:
        buffer: JPEG bytes (a prefix is enough)
    """
    length = len(buffer)
    offset = 2  # Skip JPEG SOI marker

    try:
        while offset + 2 <= length:
            marker = buffer.uint16(offset)

            if marker >> 8 != 0xFF:
                logger.debug("Lost JPEG marker sync at offset %d", offset)
                return

            # Fill bytes may precede a marker
            if marker == 0xFFFF:
                offset += 1
                continue

            if marker == SOS or marker == EOI:
                return

            if _has_no_payload(marker):
                offset += 2
                continue

            segment_length = buffer.uint16(offset + 2)
            if segment_length < 2:
                logger.debug("Invalid segment length %d at offset %d", segment_length, offset)
                return

            payload_start = offset + 4
            segment_end = offset + 2 + segment_length

            if marker == APP1 and buffer.startswith(EXIF_HEADER, payload_start):
                yield BufferRegion(REGION_TIFF, payload_start + len(EXIF_HEADER), min(segment_end, length))
            elif marker == APP13:
                yield BufferRegion(REGION_IPTC, payload_start, min(segment_end, length))

            offset = segment_end
    except MetadataReadError as exc:
        logger.debug("JPEG segment walk stopped: %s", exc)
