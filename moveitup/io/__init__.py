"""Input/Output operations for moveitup.

This package provides the streamed request body used for uploads and the
per-file progress state it updates.

Modules:

transfer : module
    FileTransfer, ProgressReporter and MultipartStream.

Public API:

FileTransfer : class
    Open file plus progress state; its ``read`` is the streaming callback.
MultipartStream : class
    File-like multipart/form-data body pulled by the HTTP layer.
ProgressReporter : class
    Writes the in-place "Progress: N%" line.
derive_file_name : function
    Display name for a local path (weakly canonicalised basename).

Example:
    from pathlib import Path
    from moveitup.io import FileTransfer, MultipartStream

    with FileTransfer.open(Path("report.pdf")) as transfer:
        body = MultipartStream("file", transfer)
        print(len(body), body.content_type)

"""

from .transfer import (
    DEFAULT_CHUNK,
    FileTransfer,
    MultipartStream,
    ProgressReporter,
    derive_file_name,
)

__all__ = [
    "DEFAULT_CHUNK",
    "FileTransfer",
    "MultipartStream",
    "ProgressReporter",
    "derive_file_name",
]
