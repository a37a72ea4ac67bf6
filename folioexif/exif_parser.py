# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
EXIF/TIFF directory reader

This module reads the TIFF structure that carries EXIF metadata, whether
it sits inside a JPEG APP1 segment, a WebP EXIF chunk or a bare TIFF
file. It walks IFD0, the EXIF sub-IFD and the GPS sub-IFD and decodes
their entries into plain ``{tag_id: value}`` mappings.

Copyright 2025 DNAi inc.
"""

import logging
import struct
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from folioexif.config import DEFAULT_CONFIG, ExtractorConfig
from folioexif.exceptions import (
    CyclicDirectoryError,
    MalformedHeaderError,
    MetadataReadError,
    TruncatedBufferError,
    UnsupportedTagTypeError,
)
from folioexif.exif_tags import ExifTag, SUB_IFD_POINTERS, TYPE_SIZES, TiffType, tag_name
from folioexif.raw_buffer import RawBuffer

logger = logging.getLogger(__name__)

# Each directory entry: tag (2), type (2), count (4), value or pointer (4)
ENTRY_SIZE = 12


@dataclass
class TiffTags:
    """Tags decoded from one TIFF region."""
    tags: Dict[int, Any] = field(default_factory=dict)
    gps_tags: Dict[int, Any] = field(default_factory=dict)


class ExifParser:
    """
    Parser for the TIFF directory structure behind EXIF metadata.

    A parser is bound to one buffer and keeps per-call state only inside
    ``parse_tiff``, so a single instance can be reused for several regions
    of the same buffer.
    """

    def __init__(self, buffer: RawBuffer, config: Optional[ExtractorConfig] = None):
        """
        Initialize the EXIF parser.

        Args:
            buffer: Image bytes
            config: Extraction limits (defaults to DEFAULT_CONFIG)
        """
        self.buffer = buffer
        self.config = config or DEFAULT_CONFIG

    def parse_tiff(self, region_start: int, region_end: Optional[int] = None) -> Optional[TiffTags]:
        """
        Parse the TIFF header at ``region_start`` and its directories.

        Args:
            region_start: Absolute offset of the TIFF header; all IFD and
                value pointers are relative to it
            region_end: Absolute end of the region (clamped to the buffer)

        Returns:
            TiffTags, or None when the header is malformed or truncated
        """
        if region_end is None or region_end > len(self.buffer):
            region_end = len(self.buffer)

        try:
            endian, first_ifd = self._read_header(region_start, region_end)
        except MetadataReadError as exc:
            logger.debug("Skipping TIFF region at %d: %s", region_start, exc)
            return None

        result = TiffTags()
        visited: Set[int] = {first_ifd}
        ifd0 = self._parse_ifd_safely(first_ifd, region_start, region_end, endian)
        result.tags.update(ifd0)

        for pointer_tag in SUB_IFD_POINTERS:
            sub_offset = self._sub_ifd_offset(result.tags, pointer_tag)
            if sub_offset is None:
                continue
            try:
                sub_tags = self._follow_pointer(sub_offset, visited, region_start, region_end, endian)
            except CyclicDirectoryError as exc:
                logger.debug("Skipping %s: %s", tag_name(pointer_tag), exc)
                continue

            if pointer_tag == ExifTag.GPS_IFD_POINTER:
                result.gps_tags.update(sub_tags)
            else:
                # IFD0 values stay; the assembler decides priority
                for tag_id, value in sub_tags.items():
                    result.tags.setdefault(tag_id, value)

        return result

    def _read_header(self, region_start: int, region_end: int):
        """Return ``(endian, first_ifd_offset)`` for the TIFF header."""
        if region_start + 8 > region_end:
            raise TruncatedBufferError(region_start, 8, region_end)

        byte_order = self.buffer.read(region_start, 2)
        if byte_order == b'II':
            endian = '<'
        elif byte_order == b'MM':
            endian = '>'
        else:
            raise MalformedHeaderError(f"Invalid TIFF byte order {byte_order!r}")

        magic = self.buffer.uint16(region_start + 2, endian)
        if magic != 42:
            raise MalformedHeaderError(f"Invalid TIFF magic number {magic}")

        return endian, self.buffer.uint32(region_start + 4, endian)

    @staticmethod
    def _sub_ifd_offset(tags: Dict[int, Any], pointer_tag: int) -> Optional[int]:
        offset = tags.get(pointer_tag)
        if isinstance(offset, int) and offset > 0:
            return offset
        return None

    def _follow_pointer(
        self,
        ifd_offset: int,
        visited: Set[int],
        region_start: int,
        region_end: int,
        endian: str,
    ) -> Dict[int, Any]:
        """Parse a sub-IFD at most once per region."""
        if ifd_offset in visited:
            raise CyclicDirectoryError(ifd_offset)
        visited.add(ifd_offset)
        return self._parse_ifd_safely(ifd_offset, region_start, region_end, endian)

    def _parse_ifd_safely(self, ifd_offset: int, region_start: int, region_end: int, endian: str) -> Dict[int, Any]:
        try:
            return self._parse_ifd(ifd_offset, region_start, region_end, endian)
        except MetadataReadError as exc:
            logger.debug("Rejected IFD at relative offset %d: %s", ifd_offset, exc)
            return {}

    def _parse_ifd(self, ifd_offset: int, region_start: int, region_end: int, endian: str) -> Dict[int, Any]:
        """
        Parse an IFD (Image File Directory) structure.

        Args:
            ifd_offset: Offset of the IFD relative to ``region_start``
            region_start: Absolute offset of the TIFF header
            region_end: Absolute end of the TIFF region
            endian: struct byte-order prefix

        Returns:
            Dictionary of tag id to decoded value

        Raises:
            TruncatedBufferError: If the entry table does not fit the region
            MetadataReadError: If the entry count is implausible
        """
        ifd_start = region_start + ifd_offset
        if ifd_start + 2 > region_end:
            raise TruncatedBufferError(ifd_start, 2, region_end)

        num_entries = self.buffer.uint16(ifd_start, endian)
        if num_entries > self.config.max_ifd_entries:
            raise MetadataReadError(f"Implausible IFD entry count {num_entries}")
        if ifd_start + 2 + num_entries * ENTRY_SIZE > region_end:
            raise TruncatedBufferError(ifd_start + 2, num_entries * ENTRY_SIZE, region_end)

        tags: Dict[int, Any] = {}
        for index in range(num_entries):
            entry_offset = ifd_start + 2 + index * ENTRY_SIZE
            try:
                tag_id, value = self._parse_entry(entry_offset, region_start, region_end, endian)
            except MetadataReadError as exc:
                logger.debug("Skipping IFD entry at %d: %s", entry_offset, exc)
                continue
            tags[tag_id] = value

        return tags

    def _parse_entry(self, entry_offset: int, region_start: int, region_end: int, endian: str):
        """Decode one 12-byte directory entry into ``(tag_id, value)``."""
        tag_id, raw_type, count = self.buffer.unpack(f'{endian}HHI', entry_offset)

        try:
            data_type = TiffType(raw_type)
        except ValueError:
            raise UnsupportedTagTypeError(tag_id, raw_type) from None

        total_size = TYPE_SIZES[data_type] * count

        # If value fits in 4 bytes, it's stored inline
        if total_size <= 4:
            data_offset = entry_offset + 8
        else:
            data_offset = region_start + self.buffer.uint32(entry_offset + 8, endian)
            if data_offset + total_size > region_end:
                raise TruncatedBufferError(data_offset, total_size, region_end)

        data = self.buffer.read(data_offset, total_size)
        value = self._decode_value(data_type, count, data, endian)
        logger.debug("Tag %s (0x%04X) type %s count %d", tag_name(tag_id), tag_id, data_type.name, count)
        return tag_id, value

    @staticmethod
    def _decode_value(data_type: TiffType, count: int, data: bytes, endian: str) -> Any:
        """
        Decode the raw bytes of a tag value.

        Args:
            data_type: TIFF field type
            count: Number of values of that type
            data: Exactly ``count * size(data_type)`` bytes
            endian: struct byte-order prefix

        Returns:
            Parsed tag value(s); single values are unwrapped
        """
        if data_type == TiffType.ASCII:
            # count includes the NUL terminator
            text = data[:max(count - 1, 0)]
            null_pos = text.find(b'\x00')
            if null_pos >= 0:
                text = text[:null_pos]
            try:
                value = text.decode('utf-8')
            except UnicodeDecodeError:
                value = text.decode('latin-1')
            return value.strip()

        if data_type in (TiffType.BYTE, TiffType.UNDEFINED):
            if count == 1:
                return data[0]
            return data

        if data_type in (TiffType.RATIONAL, TiffType.SRATIONAL):
            code = 'I' if data_type == TiffType.RATIONAL else 'i'
            pairs = struct.unpack(f'{endian}{count * 2}{code}', data)
            values: List[float] = []
            for i in range(0, len(pairs), 2):
                num, den = pairs[i], pairs[i + 1]
                values.append(num / den if den != 0 else 0.0)
            return values[0] if count == 1 else values

        code = {TiffType.SHORT: 'H', TiffType.LONG: 'I', TiffType.SLONG: 'i'}[data_type]
        numbers = list(struct.unpack(f'{endian}{count}{code}', data))
        return numbers[0] if count == 1 else numbers
