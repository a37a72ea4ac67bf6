# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Caption resolution for portfolio galleries

Gallery widgets show one caption, title, date and location per image.
Those come from, in order of priority:

1. the portfolio manifest (hand-written overrides keyed by filename),
2. embedded metadata (IPTC caption, then EXIF description),
3. a caption generated from the filename.

Copyright 2025 DNAi inc.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from folioexif.exceptions import MetadataReadError
from folioexif.metadata import Metadata
from folioexif.metadata_normalizer import SOURCE_EXIF

logger = logging.getLogger(__name__)

SOURCE_MANIFEST = 'manifest'
SOURCE_GENERATED = 'generated'

MONTH_NAMES = (
    'January', 'February', 'March', 'April', 'May', 'June',
    'July', 'August', 'September', 'October', 'November', 'December',
)


@dataclass
class CaptionResult:
    """Resolved display metadata for one gallery image."""
    title: str
    caption: Optional[str] = None
    description: Optional[str] = None
    date: Optional[str] = None
    location: Optional[Any] = None
    keywords: List[str] = field(default_factory=list)
    source: str = SOURCE_GENERATED

    def to_dict(self) -> Dict[str, Any]:
        location = self.location
        if hasattr(location, 'to_dict'):
            location = location.to_dict()
        return {
            'title': self.title,
            'caption': self.caption,
            'description': self.description,
            'date': self.date,
            'location': location,
            'keywords': list(self.keywords),
            'source': self.source,
        }


def generate_title_from_filename(filename: str) -> str:
    """
    Build a display title from an image filename.

    Example:
        >>> generate_title_from_filename('20240829_kelly-strayhorn_theater.jpg')
        'Kelly Strayhorn Theater'
    """
    stem = re.sub(r'\.[^/.]+$', '', Path(filename).name)
    stem = re.sub(r'^\d+[-_]', '', stem)
    stem = re.sub(r'[-_]', ' ', stem)
    words = re.sub(r'\s+', ' ', stem).strip().split(' ')
    return ' '.join(word[:1].upper() + word[1:].lower() for word in words if word)


def load_manifest(manifest_path: Union[str, Path]) -> Optional[Dict[str, Any]]:
    """
    Load a manifest of per-file overrides.

    Returns:
        The manifest mapping, or None when it is missing or not valid JSON
    """
    try:
        with open(manifest_path, 'r', encoding='utf-8') as f:
            manifest = json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("Manifest loading failed for %s: %s", manifest_path, exc)
        return None
    if not isinstance(manifest, dict):
        logger.warning("Manifest %s is not a JSON object", manifest_path)
        return None
    return manifest


def resolve_caption(
    filename: str,
    metadata: Optional[Metadata] = None,
    manifest_data: Optional[Dict[str, Any]] = None,
) -> CaptionResult:
    """
    Resolve the caption and display fields for one image.

    Manifest values take priority over embedded metadata; embedded
    metadata is consulted only when the manifest supplies no caption,
    but then still fills any date or location the manifest left empty.

    Args:
        filename: Image filename, the manifest key
        metadata: Extracted metadata, if any
        manifest_data: Mapping of filename to override dictionaries

    Returns:
        CaptionResult with a non-empty caption
    """
    result = CaptionResult(title=generate_title_from_filename(filename))

    entry = (manifest_data or {}).get(filename)
    if isinstance(entry, dict):
        result.caption = entry.get('caption') or None
        result.description = entry.get('description') or None
        result.date = entry.get('date') or None
        result.location = entry.get('location') or None
        result.title = entry.get('title') or result.title
        if result.caption:
            result.source = SOURCE_MANIFEST

    if not result.caption and metadata is not None:
        result.date = result.date or metadata.date
        result.location = result.location or metadata.location
        result.keywords = list(metadata.keywords)
        if metadata.caption:
            result.caption = metadata.caption
            result.source = metadata.caption_source or SOURCE_GENERATED
        elif metadata.description:
            result.caption = metadata.description
            result.source = SOURCE_EXIF

    if not result.caption:
        result.caption = f"{result.title} - Professional photography"
        result.source = SOURCE_GENERATED

    return result


def _parse_iso_date(iso_date: str) -> datetime:
    try:
        return datetime.strptime(iso_date, '%Y-%m-%dT%H:%M:%SZ')
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(iso_date.replace('Z', '+00:00'))
    except ValueError as exc:
        raise MetadataReadError(f"Unrecognized date {iso_date!r}") from exc


def format_display_date(iso_date: Optional[str], style: str = 'shortMonthYear') -> Optional[str]:
    """
    Format an ISO date for gallery display.

    Args:
        iso_date: ISO 8601 date, e.g. ``2024-08-29T20:15:00Z``
        style: ``shortMonthYear`` (Aug 2024), ``fullDate`` (August 29, 2024),
            ``year`` (2024); anything else gives ``2024-08-29``

    Returns:
        Formatted date, or None for a missing or unparseable date
    """
    if not iso_date:
        return None
    try:
        date = _parse_iso_date(iso_date)
    except MetadataReadError as exc:
        logger.debug("Cannot format date: %s", exc)
        return None

    month = MONTH_NAMES[date.month - 1]
    if style == 'shortMonthYear':
        return f"{month[:3]} {date.year}"
    if style == 'fullDate':
        return f"{month} {date.day}, {date.year}"
    if style == 'year':
        return str(date.year)
    return date.strftime('%Y-%m-%d')
