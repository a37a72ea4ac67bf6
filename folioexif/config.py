# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Extractor configuration

Limits and priority rules shared by the decoding stages. The defaults
match what gallery callers fetch in practice: a 64 KiB prefix of each
image is enough to hold every metadata segment.

Copyright 2025 DNAi inc.
"""

from typing import Optional, Sequence, Tuple

from folioexif.exif_tags import ExifTag


class ExtractorConfig:
    """
    Configuration for metadata extraction.

    Instances are treated as read-only by the library; build a new one
    to change a setting rather than mutating ``DEFAULT_CONFIG``.
    """

    def __init__(
        self,
        max_prefix_bytes: int = 65536,
        max_iptc_dataset_length: int = 2000,
        max_ifd_entries: int = 1000,
        date_tag_priority: Optional[Sequence[int]] = None,
    ):
        """
        Initialize with default limits.

        Args:
            max_prefix_bytes: Bytes read from the start of a file by the file helpers
            max_iptc_dataset_length: Longest IPTC dataset payload accepted as real
            max_ifd_entries: Directories declaring more entries are rejected
            date_tag_priority: Tag ids consulted for the capture date, best first
        """
        self.max_prefix_bytes = max_prefix_bytes
        self.max_iptc_dataset_length = max_iptc_dataset_length
        self.max_ifd_entries = max_ifd_entries
        self.date_tag_priority: Tuple[int, ...] = tuple(
            date_tag_priority if date_tag_priority is not None else (
                ExifTag.DATE_TIME_ORIGINAL,
                ExifTag.DATE_TIME_DIGITIZED,
                ExifTag.DATE_TIME,
            )
        )

    def __repr__(self) -> str:
        return (
            f"ExtractorConfig(max_prefix_bytes={self.max_prefix_bytes}, "
            f"max_iptc_dataset_length={self.max_iptc_dataset_length}, "
            f"max_ifd_entries={self.max_ifd_entries}, "
            f"date_tag_priority={self.date_tag_priority})"
        )


DEFAULT_CONFIG = ExtractorConfig()
