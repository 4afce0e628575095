"""
Custom exception hierarchy for the media sorter.

Only metadata decoding failures are recovered from (the file is skipped).
Everything else aborts the run.
"""


class MediaSorterError(Exception):
    """Base exception for all media sorter errors."""
    pass


class MetadataDecodeError(MediaSorterError):
    """Raised when the metadata stream of a file cannot be decoded."""
    pass


class FileOperationError(MediaSorterError):
    """Raised when a move/delete/mkdir operation fails."""
    pass


class SourceFolderError(MediaSorterError):
    """Raised when the source folder does not exist."""
    pass
