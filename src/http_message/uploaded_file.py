"""
Uploaded files for http_message.

An UploadedFile wraps the stream a client sent for a file field and can
be moved to its final location exactly once.
"""

import enum
import logging
import os
import shutil
from typing import Optional, Union

from .exceptions import UploadedFileError
from .streams import StreamInterface

logger = logging.getLogger(__name__)


class UploadError(enum.IntEnum):
    """Upload status codes, numbered as CGI upload handlers report them."""
    OK = 0
    INI_SIZE = 1
    FORM_SIZE = 2
    PARTIAL = 3
    NO_FILE = 4
    NO_TMP_DIR = 6
    CANT_WRITE = 7
    EXTENSION = 8


class UploadedFile:
    """
    A file received as part of a server request.

    Unlike the message types this object is stateful: once moved, its
    stream is no longer available.
    """

    DEFAULT_CHUNK_SIZE = 4096

    def __init__(
        self,
        stream: StreamInterface,
        error: int = UploadError.OK,
        size: Optional[int] = None,
        client_filename: Optional[str] = None,
        client_media_type: Optional[str] = None,
        chunk_size: Optional[int] = None,
    ) -> None:
        """
        Initialize UploadedFile.

        Args:
            stream: Stream holding the file contents
            error: One of the UploadError codes
            size: File size in bytes, if known
            client_filename: File name sent by the client
            client_media_type: Media type sent by the client
            chunk_size: Size of the chunks used when copying the stream
        """
        self._stream = stream
        self._error = UploadError(error)
        self._size = None if size is None else int(size)
        self._client_filename = client_filename
        self._client_media_type = client_media_type
        self._chunk_size = chunk_size or self.DEFAULT_CHUNK_SIZE
        self._moved = False

    @property
    def stream(self) -> StreamInterface:
        """Get the file stream; unavailable once the file was moved."""
        if self._moved:
            raise UploadedFileError("This file was already moved")
        return self._stream

    @property
    def size(self) -> Optional[int]:
        return self._size

    @property
    def error(self) -> UploadError:
        return self._error

    @property
    def client_filename(self) -> Optional[str]:
        return self._client_filename

    @property
    def client_media_type(self) -> Optional[str]:
        return self._client_media_type

    @property
    def moved(self) -> bool:
        return self._moved

    def move_to(self, target_path: Union[str, "os.PathLike[str]"]) -> None:
        """
        Move the uploaded file to ``target_path``.

        A stream backed by a named file is renamed; any other stream is
        copied to the target in chunks.

        Raises:
            UploadedFileError: On upload errors, a second move or I/O failure
        """
        if self._error is not UploadError.OK:
            raise UploadedFileError(
                f"Cannot move file due to upload error {self._error.name}"
            )

        source = self.stream
        source_path = source.get_metadata("uri")

        try:
            if source.get_metadata("stream_type") == "file" and source_path:
                # The stream is closed only once the rename succeeded.
                shutil.move(source_path, os.fspath(target_path))
                source.close()
            else:
                self._write_stream_to_file(source, target_path)
        except OSError as e:
            raise UploadedFileError(f"Failed to move file to {target_path}", cause=e) from e

        self._moved = True
        logger.debug(f"Uploaded file {self._client_filename!r} moved to {target_path}")

    def _write_stream_to_file(
        self, source: StreamInterface, target_path: Union[str, "os.PathLike[str]"]
    ) -> None:
        if source.seekable:
            source.rewind()
        with open(target_path, "wb") as target:
            while not source.eof():
                target.write(source.read(self._chunk_size))

    def __repr__(self) -> str:
        return (
            f"UploadedFile(client_filename={self._client_filename!r}, "
            f"size={self._size!r}, error={self._error.name})"
        )
