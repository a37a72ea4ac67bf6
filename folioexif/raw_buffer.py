# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Bounds-checked byte buffer

All parsers read through ``RawBuffer`` so that every offset is validated
against the buffer length before the read happens. A read that would run
past the end raises ``TruncatedBufferError`` instead of silently returning
a short slice.

Copyright 2025 DNAi inc.
"""

import struct
from typing import Any, NamedTuple, Tuple, Union

from folioexif.exceptions import TruncatedBufferError

# Region kinds produced by the segment scanners
REGION_TIFF = 'tiff'
REGION_IPTC = 'iptc'


class BufferRegion(NamedTuple):
    """A metadata region located by a segment scanner, as absolute offsets."""
    kind: str
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


class RawBuffer:
    """
    Immutable view over image bytes.

    Byte order is chosen per read via the ``struct`` format prefix
    (``'<'`` or ``'>'``), because a single JPEG mixes big-endian marker
    fields with TIFF fields in either order, and WebP chunk sizes are
    always little-endian.
    """

    __slots__ = ('_data',)

    def __init__(self, data: Union[bytes, bytearray, memoryview]):
        self._data = bytes(data)

    def __len__(self) -> int:
        return len(self._data)

    @property
    def data(self) -> bytes:
        return self._data

    def check(self, offset: int, size: int) -> None:
        """Raise ``TruncatedBufferError`` unless ``[offset, offset+size)`` is readable."""
        if offset < 0 or size < 0 or offset + size > len(self._data):
            raise TruncatedBufferError(offset, size, len(self._data))

    def read(self, offset: int, size: int) -> bytes:
        self.check(offset, size)
        return self._data[offset:offset + size]

    def unpack(self, fmt: str, offset: int) -> Tuple[Any, ...]:
        """Unpack ``fmt`` at ``offset`` after validating the full size."""
        size = struct.calcsize(fmt)
        self.check(offset, size)
        return struct.unpack_from(fmt, self._data, offset)

    def uint16(self, offset: int, endian: str = '>') -> int:
        return self.unpack(f'{endian}H', offset)[0]

    def uint32(self, offset: int, endian: str = '>') -> int:
        return self.unpack(f'{endian}I', offset)[0]

    def startswith(self, prefix: bytes, offset: int = 0) -> bool:
        """Compare bytes at ``offset``; a short buffer simply does not match."""
        return self._data[offset:offset + len(prefix)] == prefix
