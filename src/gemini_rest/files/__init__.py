"""File API: uploads, metadata and downloads."""

from .builder import FileBuilder
from .handle import FileHandle
from .model import File, FileState, ListFilesResponse, normalize_file_name

__all__ = [
    "File",
    "FileBuilder",
    "FileHandle",
    "FileState",
    "ListFilesResponse",
    "normalize_file_name",
]
