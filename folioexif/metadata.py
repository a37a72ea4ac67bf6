# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Metadata result types

The value objects returned by ``extract_metadata``. They are frozen once
assembled and convert to plain JSON-ready dictionaries for manifest
writers and gallery widgets.

Copyright 2025 DNAi inc.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union


@dataclass(frozen=True)
class GPSLocation:
    """Decimal-degree coordinates from the EXIF GPS sub-IFD."""
    latitude: float
    longitude: float

    def to_dict(self) -> Dict[str, Any]:
        return {'latitude': self.latitude, 'longitude': self.longitude}


@dataclass(frozen=True)
class PlaceLocation:
    """Named place from IPTC city/state/country datasets."""
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            key: value
            for key, value in (('city', self.city), ('state', self.state), ('country', self.country))
            if value is not None
        }


Location = Union[GPSLocation, PlaceLocation]


@dataclass(frozen=True)
class Metadata:
    """
    Structured metadata for one image.

    ``date`` is either None or an ISO 8601 string of the exact form
    ``YYYY-MM-DDTHH:MM:SSZ``. ``caption_source`` records where the
    caption came from (``'iptc'`` or ``'exif'``) for diagnostics.
    """
    date: Optional[str] = None
    caption: Optional[str] = None
    description: Optional[str] = None
    keywords: Tuple[str, ...] = ()
    location: Optional[Location] = None
    caption_source: Optional[str] = None

    @classmethod
    def empty(cls) -> 'Metadata':
        return cls()

    def is_empty(self) -> bool:
        return (
            self.date is None
            and self.caption is None
            and self.description is None
            and not self.keywords
            and self.location is None
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serialisable dictionary."""
        return {
            'date': self.date,
            'caption': self.caption,
            'description': self.description,
            'keywords': list(self.keywords),
            'location': self.location.to_dict() if self.location is not None else None,
            'captionSource': self.caption_source,
        }
