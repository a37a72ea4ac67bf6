# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Metadata Normalization Module

This module merges the decoded TIFF tags and IPTC datasets of one image
into a single ``Metadata`` value. It owns every priority rule: which date
tag wins, whether the caption comes from IPTC or EXIF, and whether the
location is GPS coordinates or an IPTC place name.

Copyright 2025 DNAi inc.
"""

import re
from typing import Any, Dict, Optional, Sequence

from folioexif.config import DEFAULT_CONFIG, ExtractorConfig
from folioexif.exif_tags import ExifTag, GPSTag
from folioexif.iptc_parser import IPTCResult
from folioexif.metadata import GPSLocation, Location, Metadata

# EXIF format: "YYYY:MM:DD HH:MM:SS", optionally followed by subseconds
EXIF_DATE_PATTERN = re.compile(r'(\d{4}):(\d{2}):(\d{2}) (\d{2}):(\d{2}):(\d{2})')

SOURCE_IPTC = 'iptc'
SOURCE_EXIF = 'exif'


def format_exif_date(value: Any) -> Optional[str]:
    """
    Convert an EXIF date string to ``YYYY-MM-DDTHH:MM:SSZ``.

    Args:
        value: Raw tag value

    Returns:
        Canonical ISO 8601 string, or None when the value does not match
        the EXIF layout. Fields are copied as-is, so placeholder dates
        such as ``0000:00:00 00:00:00`` keep their zeros

    Example:
        >>> format_exif_date('2024:08:29 20:15:00')
        '2024-08-29T20:15:00Z'
    """
    if not isinstance(value, str):
        return None
    match = EXIF_DATE_PATTERN.match(value.strip())
    if not match:
        return None
    year, month, day, hour, minute, second = match.groups()
    return f"{year}-{month}-{day}T{hour}:{minute}:{second}Z"


def choose_date(tags: Dict[int, Any], priority: Sequence[int]) -> Optional[str]:
    """
    Pick the capture date by tag priority.

    The first tag in ``priority`` holding a non-empty string wins; a
    winner that is not a valid EXIF date yields None rather than falling
    through to a lower-priority tag.
    """
    for tag_id in priority:
        value = tags.get(tag_id)
        if isinstance(value, str) and value.strip():
            return format_exif_date(value)
    return None


def gps_to_decimal(coordinate: Any, ref: Any) -> Optional[float]:
    """
    Convert a degrees/minutes/seconds triple to signed decimal degrees.

    Args:
        coordinate: Sequence of three numbers (degrees, minutes, seconds)
        ref: Hemisphere reference, ``'N'``/``'S'``/``'E'``/``'W'``

    Returns:
        Decimal degrees, negative for the southern and western hemispheres,
        or None when the coordinate is malformed
    """
    if not isinstance(coordinate, (list, tuple)) or len(coordinate) < 3:
        return None
    if not all(isinstance(part, (int, float)) for part in coordinate[:3]):
        return None

    degrees, minutes, seconds = coordinate[:3]
    decimal = degrees + minutes / 60.0 + seconds / 3600.0
    if isinstance(ref, str) and ref.strip().upper() in ('S', 'W'):
        decimal = -decimal
    return decimal


def gps_location(gps_tags: Dict[int, Any]) -> Optional[GPSLocation]:
    """
    Build a GPSLocation when both latitude and longitude decode.

    Coordinates outside the valid ranges (latitude past 90 degrees north
    or south, longitude past 180 east or west) are treated as corrupt and
    yield None, letting the assembler fall back to the IPTC place.
    """
    latitude = gps_to_decimal(gps_tags.get(GPSTag.GPS_LATITUDE), gps_tags.get(GPSTag.GPS_LATITUDE_REF))
    longitude = gps_to_decimal(gps_tags.get(GPSTag.GPS_LONGITUDE), gps_tags.get(GPSTag.GPS_LONGITUDE_REF))
    if latitude is None or longitude is None:
        return None
    if not (-90 <= latitude <= 90) or not (-180 <= longitude <= 180):
        return None
    return GPSLocation(latitude=latitude, longitude=longitude)


def _text_tag(tags: Dict[int, Any], tag_id: int) -> Optional[str]:
    value = tags.get(tag_id)
    if isinstance(value, str):
        return value or None
    return None


def _xp_tag(tags: Dict[int, Any], tag_id: int) -> Optional[str]:
    """Windows XP* tags are UCS-2 little-endian text stored as BYTE arrays."""
    value = tags.get(tag_id)
    if not isinstance(value, (bytes, bytearray)) or len(value) < 2:
        return None
    text = bytes(value[:len(value) - len(value) % 2]).decode('utf-16-le', errors='replace')
    return text.rstrip('\x00').strip() or None


def assemble(
    tiff_tags: Optional[Dict[int, Any]],
    gps_tags: Optional[Dict[int, Any]] = None,
    iptc: Optional[IPTCResult] = None,
    config: Optional[ExtractorConfig] = None,
) -> Metadata:
    """
    Merge decoded tags into the final Metadata value.

    Args:
        tiff_tags: IFD0 and EXIF sub-IFD tags (IFD0 values take precedence
            on duplicate ids)
        gps_tags: GPS sub-IFD tags
        iptc: IPTC datasets
        config: Priority configuration (defaults to DEFAULT_CONFIG)

    Returns:
        Immutable Metadata
    """
    config = config or DEFAULT_CONFIG
    tags = tiff_tags or {}
    iptc = iptc or IPTCResult()

    image_description = _text_tag(tags, ExifTag.IMAGE_DESCRIPTION)
    exif_caption = image_description or _xp_tag(tags, ExifTag.XP_TITLE)

    if iptc.caption:
        caption, caption_source = iptc.caption, SOURCE_IPTC
    elif exif_caption:
        caption, caption_source = exif_caption, SOURCE_EXIF
    else:
        caption, caption_source = None, None

    location: Optional[Location] = gps_location(gps_tags or {})
    if location is None:
        location = iptc.location

    return Metadata(
        date=choose_date(tags, config.date_tag_priority),
        caption=caption,
        description=image_description or _xp_tag(tags, ExifTag.XP_COMMENT),
        keywords=tuple(iptc.keywords),
        location=location,
        caption_source=caption_source,
    )
