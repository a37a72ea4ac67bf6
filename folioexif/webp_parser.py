# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
WebP chunk scanner.

WebP stores metadata inside RIFF chunks. EXIF data lives in an `EXIF`
chunk containing the familiar TIFF structure. RIFF chunk sizes are
little-endian regardless of the byte order the embedded TIFF header
declares, and odd-sized chunks carry one padding byte.
"""

import logging
from typing import Iterator, Tuple

from folioexif.exceptions import MetadataReadError
from folioexif.jpeg_parser import EXIF_HEADER
from folioexif.raw_buffer import REGION_TIFF, BufferRegion, RawBuffer

logger = logging.getLogger(__name__)

CHUNK_EXIF = b'EXIF'

# RIFF size (4) + 'WEBP' form type follow the 'RIFF' tag
RIFF_HEADER_SIZE = 12
CHUNK_HEADER_SIZE = 8


def iterate_chunks(buffer: RawBuffer) -> Iterator[Tuple[bytes, int, int]]:
    """
    Yield ``(chunk_type, body_start, declared_size)`` for each RIFF chunk.

    The walk stops when a chunk header no longer fits in the buffer. The
    declared size is reported as-is; a body cut short by a partial fetch
    is the consumer's concern.
    """
    length = len(buffer)
    offset = RIFF_HEADER_SIZE
    try:
        while offset + CHUNK_HEADER_SIZE <= length:
            chunk_type = buffer.read(offset, 4)
            chunk_size = buffer.uint32(offset + 4, '<')
            body_start = offset + CHUNK_HEADER_SIZE
            yield chunk_type, body_start, chunk_size
            offset = body_start + chunk_size
            if chunk_size % 2:
                offset += 1  # Chunks are padded to even sizes
    except MetadataReadError as exc:
        logger.debug("WebP chunk walk stopped: %s", exc)


def iterate_segments(buffer: RawBuffer) -> Iterator[BufferRegion]:
    """Yield the TIFF region of every EXIF chunk in a WebP buffer."""
    for chunk_type, body_start, chunk_size in iterate_chunks(buffer):
        if chunk_type != CHUNK_EXIF:
            continue
        start = body_start
        end = min(body_start + chunk_size, len(buffer))
        # Some encoders keep the JPEG-style prefix inside the chunk
        if buffer.startswith(EXIF_HEADER, start):
            start += len(EXIF_HEADER)
        yield BufferRegion(REGION_TIFF, start, end)
