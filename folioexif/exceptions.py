# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Exception classes for FolioExif

Every decoding stage raises one of these when it cannot continue. The
stage that owns the recovery policy catches it and degrades to a partial
result, so none of these ever escape ``extract_metadata``. Only the file
helpers surface ``MetadataReadError`` to callers, and only for
file-system problems.

Copyright 2025 DNAi inc.
"""


class FolioExifError(Exception):
    """
    Base exception for all FolioExif errors.

    All FolioExif exceptions inherit from this class, allowing
    catch-all error handling at the extraction boundary.
    """
    def __init__(self, message: str = ""):
        """
        Initialize the exception with an optional error message.

        Args:
            message: Descriptive error message explaining what went wrong
        """
        self.message = message
        super().__init__(message)


class MetadataReadError(FolioExifError):
    """
    Raised when metadata cannot be read.

    This exception is raised when:
    - A file cannot be opened or read
    - A metadata region cannot be decoded at all
    """
    pass


class TruncatedBufferError(MetadataReadError):
    """
    Raised when a read would run past the end of the buffer.

    Partial-range fetches routinely cut images mid-segment, so this is
    the most common soft failure. The current stage stops and keeps
    whatever it already gathered.
    """
    def __init__(self, offset: int, size: int, length: int):
        self.offset = offset
        self.size = size
        self.length = length
        super().__init__(
            f"Read of {size} bytes at offset {offset} exceeds buffer length {length}"
        )


class MalformedHeaderError(MetadataReadError):
    """Raised when a TIFF byte-order mark or magic number is invalid."""
    pass


class UnsupportedTagTypeError(MetadataReadError):
    """Raised when a directory entry declares a type outside the eight TIFF types."""
    def __init__(self, tag_id: int, data_type: int):
        self.tag_id = tag_id
        self.data_type = data_type
        super().__init__(f"Tag 0x{tag_id:04X} has unsupported type {data_type}")


class CyclicDirectoryError(MetadataReadError):
    """Raised when a sub-IFD pointer revisits an already parsed directory."""
    def __init__(self, offset: int):
        self.offset = offset
        super().__init__(f"IFD at offset {offset} already visited")


class UnsupportedFormatError(FolioExifError):
    """
    Raised when the container format is not recognized.

    This exception is raised when:
    - The buffer is shorter than any container signature
    - The signature matches none of JPEG, WebP or TIFF
    """
    pass
