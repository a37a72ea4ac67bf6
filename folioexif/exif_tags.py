# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
EXIF, GPS and IPTC tag definitions

Closed sets of the tag ids, TIFF field types and IPTC dataset ids the
extractor understands. Tags outside these sets are still read into the
directory mapping by their numeric id; they are just never consulted.

Copyright 2025 DNAi inc.
"""

from enum import IntEnum
from typing import Dict


class ExifTag(IntEnum):
    """IFD0 and EXIF sub-IFD tags used by the metadata assembler."""
    IMAGE_DESCRIPTION = 0x010E
    MAKE = 0x010F
    MODEL = 0x0110
    DATE_TIME = 0x0132
    ARTIST = 0x013B
    COPYRIGHT = 0x8298
    EXIF_IFD_POINTER = 0x8769
    GPS_IFD_POINTER = 0x8825
    DATE_TIME_ORIGINAL = 0x9003
    DATE_TIME_DIGITIZED = 0x9004
    XP_TITLE = 0x9C9B
    XP_COMMENT = 0x9C9C


class GPSTag(IntEnum):
    """Tags of the GPS sub-IFD."""
    GPS_VERSION_ID = 0x0000
    GPS_LATITUDE_REF = 0x0001
    GPS_LATITUDE = 0x0002
    GPS_LONGITUDE_REF = 0x0003
    GPS_LONGITUDE = 0x0004
    GPS_ALTITUDE_REF = 0x0005
    GPS_ALTITUDE = 0x0006


class TiffType(IntEnum):
    """TIFF field types"""
    BYTE = 1
    ASCII = 2
    SHORT = 3
    LONG = 4
    RATIONAL = 5
    UNDEFINED = 7
    SLONG = 9
    SRATIONAL = 10


# TIFF field sizes in bytes
TYPE_SIZES: Dict[TiffType, int] = {
    TiffType.BYTE: 1,
    TiffType.ASCII: 1,
    TiffType.SHORT: 2,
    TiffType.LONG: 4,
    TiffType.RATIONAL: 8,
    TiffType.UNDEFINED: 1,
    TiffType.SLONG: 4,
    TiffType.SRATIONAL: 8,
}

# Sub-IFD pointer tags, in the order they are followed
SUB_IFD_POINTERS = (ExifTag.EXIF_IFD_POINTER, ExifTag.GPS_IFD_POINTER)


class IPTCDataset(IntEnum):
    """IPTC record 2 (Application Record) datasets the reader keeps."""
    KEYWORDS = 0x19
    CITY = 0x5A
    PROVINCE_STATE = 0x5F
    COUNTRY = 0x65
    CAPTION = 0x78


# IPTC place datasets mapped to PlaceLocation field names
IPTC_PLACE_FIELDS: Dict[int, str] = {
    IPTCDataset.CITY: 'city',
    IPTCDataset.PROVINCE_STATE: 'state',
    IPTCDataset.COUNTRY: 'country',
}

# Human readable names, used in debug logging
EXIF_TAG_NAMES: Dict[int, str] = {
    ExifTag.IMAGE_DESCRIPTION: "ImageDescription",
    ExifTag.MAKE: "Make",
    ExifTag.MODEL: "Model",
    ExifTag.DATE_TIME: "DateTime",
    ExifTag.ARTIST: "Artist",
    ExifTag.COPYRIGHT: "Copyright",
    ExifTag.EXIF_IFD_POINTER: "ExifOffset",
    ExifTag.GPS_IFD_POINTER: "GPSInfo",
    ExifTag.DATE_TIME_ORIGINAL: "DateTimeOriginal",
    ExifTag.DATE_TIME_DIGITIZED: "CreateDate",
    ExifTag.XP_TITLE: "XPTitle",
    ExifTag.XP_COMMENT: "XPComment",
}


def tag_name(tag_id: int) -> str:
    """Return a readable name for an IFD0/EXIF tag id."""
    return EXIF_TAG_NAMES.get(tag_id, f"Unknown_{tag_id:04X}")
