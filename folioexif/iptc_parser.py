# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
IPTC metadata parser

This module reads IPTC (International Press Telecommunications Council)
record 2 datasets from a JPEG APP13 segment. Photojournalism workflows
store the caption, keywords and place names there.

The reader does not walk the Photoshop 8BIM resource structure. It scans
the segment byte by byte for the ``0x1C 0x02`` record marker, which also
finds IPTC blocks written by tools that skip the resource wrapper. The
cost is that a ``0x1C 0x02`` pair inside unrelated binary payload can be
taken for a dataset; only the length sanity check guards against that.

Copyright 2025 DNAi inc.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import chardet

from folioexif.config import DEFAULT_CONFIG, ExtractorConfig
from folioexif.exif_tags import IPTC_PLACE_FIELDS, IPTCDataset
from folioexif.metadata import PlaceLocation
from folioexif.raw_buffer import RawBuffer

logger = logging.getLogger(__name__)

# Tag marker (0x1C) followed by record number 2 (Application Record)
RECORD_2_MARKER = b'\x1c\x02'

# Marker (2) + dataset id (1) + length (2)
DATASET_HEADER_SIZE = 5


@dataclass
class IPTCResult:
    """Datasets gathered from one IPTC region."""
    caption: Optional[str] = None
    keywords: List[str] = field(default_factory=list)
    location: Optional[PlaceLocation] = None


def decode_iptc_text(data: bytes) -> str:
    """
    Decode an IPTC text payload.

    UTF-8 is tried first. Older files carry Latin-1 or Windows code pages
    without declaring a coded character set, so the encoding is detected
    when UTF-8 fails; Latin-1 always succeeds as the last resort.
    """
    try:
        text = data.decode('utf-8')
    except UnicodeDecodeError:
        encoding = chardet.detect(data).get('encoding')
        text = None
        if encoding:
            try:
                text = data.decode(encoding)
            except (LookupError, UnicodeDecodeError):
                text = None
        if text is None:
            text = data.decode('latin-1')
    return text.rstrip('\x00').strip()


class IPTCParser:
    """
    Parser for IPTC record 2 datasets.

    Only the caption (first occurrence wins), keywords (every occurrence,
    in order, duplicates kept) and city/state/country are kept.
    """

    def __init__(self, buffer: RawBuffer, config: Optional[ExtractorConfig] = None):
        """
        Initialize the IPTC parser.

        Args:
            buffer: Image bytes
            config: Extraction limits (defaults to DEFAULT_CONFIG)
        """
        self.buffer = buffer
        self.config = config or DEFAULT_CONFIG

    def parse(self, region_start: int, region_length: int) -> IPTCResult:
        """
        Scan a region for record 2 datasets.

        Args:
            region_start: Absolute offset of the region (APP13 payload)
            region_length: Declared region length; clamped to the buffer

        Returns:
            IPTCResult with whatever datasets were found
        """
        result = IPTCResult()
        place: Dict[str, str] = {}
        data = self.buffer.data
        region_end = min(region_start + max(region_length, 0), len(data))

        offset = region_start
        while offset + DATASET_HEADER_SIZE <= region_end:
            if data[offset:offset + 2] != RECORD_2_MARKER:
                offset += 1
                continue

            dataset = data[offset + 2]
            length = self.buffer.uint16(offset + 3)
            payload_start = offset + DATASET_HEADER_SIZE
            if length == 0 or length > self.config.max_iptc_dataset_length or payload_start + length > len(data):
                logger.debug("Ignoring IPTC marker at %d with length %d", offset, length)
                offset += 1
                continue

            self._apply_dataset(result, place, dataset, data[payload_start:payload_start + length])
            # Step one byte so a false match cannot hide the datasets behind it
            offset += 1

        if place:
            result.location = PlaceLocation(**place)
        return result

    @staticmethod
    def _apply_dataset(result: IPTCResult, place: Dict[str, str], dataset: int, payload: bytes) -> None:
        if dataset == IPTCDataset.CAPTION:
            if result.caption is None:
                result.caption = decode_iptc_text(payload)
        elif dataset == IPTCDataset.KEYWORDS:
            result.keywords.append(decode_iptc_text(payload))
        elif dataset in IPTC_PLACE_FIELDS:
            place[IPTC_PLACE_FIELDS[dataset]] = decode_iptc_text(payload)
