"""
Streamed file transfer for moveitup uploads.

The upload body is never held in memory. Instead the HTTP layer pulls it
piece by piece from a file-like MultipartStream, which in turn pulls file
bytes from a FileTransfer. Every pull that returns file data updates the
transfer's progress state and, when the whole percentage changes, rewrites
the progress line on stdout.

Output format (written in place with carriage returns):

    \\rProgress: 0%\\rProgress: 1%...\\rProgress: 100%\\rFinished 100%\\n

Classes:

- ProgressReporter: Writes "Progress: N%" / "Finished 100%" lines.
- FileTransfer: Open file plus its progress state; the read callback.
- MultipartStream: multipart/form-data body with a single file part.

Example:
    Streaming a file through requests:

        >>> transfer = FileTransfer.open(Path("report.pdf"))
        >>> body = MultipartStream("file", transfer)
        >>> requests.post(url, data=body, headers={"Content-Type": body.content_type})
        >>> transfer.close()

Notes:
- A read error from the local file is treated as end of file. The request
  then carries fewer bytes than its Content-Length announced, and it is up
  to the server (or the transport) to reject it.
- FileTransfer never hands out more than the size captured at open time,
  so bytes_read <= total_size always holds even if the file grows.
"""

from __future__ import annotations

from pathlib import Path
import sys
from typing import BinaryIO, TextIO

from urllib3.fields import RequestField
from urllib3.filepost import choose_boundary

from moveitup.exceptions import FileAccessError
from moveitup.logging import Logger, get_global_logger

# Read size used when a caller asks for "everything" (size < 0).
DEFAULT_CHUNK = 64 * 1024


class ProgressReporter:
    """Rewrite a single progress line on a text stream.

    The stream is looked up at write time when not given, so redirecting
    sys.stdout after construction still works.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def start(self) -> None:
        self.stream.write("Starting file upload\n")
        self.stream.flush()

    def update(self, percent: int) -> None:
        self.stream.write(f"\rProgress: {percent}%")
        self.stream.flush()

    def finish(self) -> None:
        self.stream.write("\rFinished 100%\n")
        self.stream.flush()


def derive_file_name(path: str | Path) -> str:
    """Return the display name for a local path.

    The path is canonicalised without requiring it to exist ("." and ".."
    segments and symlinks resolved where possible), then its final
    component is taken verbatim.

    Example:
        >>> derive_file_name("/tmp/./reports/../reports/q1.pdf")
        'q1.pdf'
        >>> derive_file_name("report (final).pdf")
        'report (final).pdf'
    """
    return Path(path).resolve(strict=False).name


class FileTransfer:
    """An open file being uploaded, plus its progress state.

    Attributes:
        name: Display name sent as the multipart filename.
        total_size: Size in bytes captured when the file was opened.
        bytes_read: Bytes handed to the HTTP layer so far.
        current_percentage: Last reported whole percentage (-1 before the first).
        finished: True once end of file has been reported.
    """

    def __init__(
        self,
        handle: BinaryIO,
        name: str,
        total_size: int,
        *,
        reporter: ProgressReporter | None = None,
        logger: Logger | None = None,
    ) -> None:
        self._handle = handle
        self.name = name
        self.total_size = total_size
        self.bytes_read = 0
        self.current_percentage = -1
        self.finished = False
        self._reporter = reporter or ProgressReporter()
        self._logger = logger or get_global_logger()

    @classmethod
    def open(
        cls,
        path: str | Path,
        *,
        reporter: ProgressReporter | None = None,
        logger: Logger | None = None,
    ) -> FileTransfer:
        """Open ``path`` for binary reading and capture its name and size.

        Raises:
            FileAccessError: If the file cannot be opened or sized.
        """
        try:
            handle = open(path, "rb")
        except (OSError, ValueError) as err:
            # ValueError: path with an embedded NUL byte
            raise FileAccessError(f"Failed to open file {str(path)!r}: {err}") from err

        try:
            handle.seek(0, 2)
            total_size = handle.tell()
            handle.seek(0)
        except OSError as err:
            handle.close()
            raise FileAccessError(f"Failed to size file {str(path)!r}: {err}") from err

        return cls(
            handle,
            derive_file_name(path),
            total_size,
            reporter=reporter,
            logger=logger,
        )

    @property
    def closed(self) -> bool:
        return self._handle.closed

    def close(self) -> None:
        self._handle.close()

    def __enter__(self) -> FileTransfer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def read(self, size: int = DEFAULT_CHUNK) -> bytes:
        """Return up to ``size`` further bytes of the file, updating progress.

        Returns b"" at end of file; the first time that happens the
        "Finished 100%" line is written.
        """
        if self.finished or size == 0:
            return b""

        remaining = self.total_size - self.bytes_read
        data = b""
        if remaining > 0:
            if size < 0:
                size = remaining
            try:
                data = self._handle.read(min(size, remaining))
            except OSError as err:
                self._logger.debug(
                    "FILE", f"Read error after {self.bytes_read} bytes, ending upload: {err}"
                )
                data = b""

        if not data:
            self.finished = True
            self._reporter.finish()
            return b""

        self.bytes_read += len(data)
        percent = self.bytes_read * 100 // self.total_size
        if percent != self.current_percentage:
            self.current_percentage = percent
            self._reporter.update(percent)
        return data


class MultipartStream:
    """A multipart/form-data body with one streamed file part.

    requests sends any object with ``read`` and ``__len__`` as a streamed
    body with a fixed Content-Length, pulling it in blocks through
    :meth:`read`. The part headers are rendered by urllib3, the same way
    ``urllib3.encode_multipart_formdata`` renders them.

    Attributes:
        boundary: Multipart boundary string.
        content_type: Value for the request's Content-Type header.
    """

    def __init__(
        self,
        field_name: str,
        transfer: FileTransfer,
        *,
        boundary: str | None = None,
        part_content_type: str = "application/octet-stream",
    ) -> None:
        self.boundary = boundary or choose_boundary()
        self._transfer = transfer

        part = RequestField(name=field_name, data=b"", filename=transfer.name)
        part.make_multipart(content_type=part_content_type)
        self._preamble = (
            f"--{self.boundary}\r\n".encode("latin-1")
            + part.render_headers().encode("utf-8")
        )
        self._epilogue = f"\r\n--{self.boundary}--\r\n".encode("latin-1")

        self._pending = self._preamble
        self._body_done = False

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self.boundary}"

    def __len__(self) -> int:
        return len(self._preamble) + self._transfer.total_size + len(self._epilogue)

    def _next_piece(self, size: int) -> bytes:
        if self._pending:
            piece, self._pending = self._pending[:size], self._pending[size:]
            return piece
        if self._body_done:
            return b""

        data = self._transfer.read(size)
        if data:
            return data

        self._body_done = True
        self._pending = self._epilogue
        return self._next_piece(size)

    def read(self, size: int | None = -1) -> bytes:
        """Return up to ``size`` bytes of the body (all remaining if negative)."""
        if size is None or size < 0:
            return b"".join(iter(lambda: self.read(DEFAULT_CHUNK), b""))

        pieces = []
        while size > 0:
            piece = self._next_piece(size)
            if not piece:
                break
            pieces.append(piece)
            size -= len(piece)
        return b"".join(pieces)
