"""Access to the content of a file.

    A FileContent is bound to one FileObject and can be obtained whether or
    not the file exists; writing to it is one of the ways a file gets created.
    Streams handed out are tracked so that closing the content (or the file)
    releases all of them, and each stream is a context manager so that
    callers can guarantee release on every exit path.
"""
from __future__ import annotations
import datetime
import threading
import typing as t

import zrlog

from .exc import WrongTypeError, ReadOnlyError, MissingFileError
from .file_type import FileType
from .util import read_in_chunks, copy_stream

if t.TYPE_CHECKING:
    from .file_object import FileObject


UNKNOWN_CONTENT_TYPE = "application/octet-stream"
UNKNOWN_ENCODING = "identity"


class ContentInfo:
    """Content type and encoding of a file.

        Values the provider cannot determine are reported as
        application/octet-stream and identity, never as None.
    """

    def __init__(self, content_type: t.Optional[str] = None, encoding: t.Optional[str] = None):
        self.is_known = content_type is not None
        self.content_type = content_type or UNKNOWN_CONTENT_TYPE
        self.encoding = encoding or UNKNOWN_ENCODING

    def __eq__(self, other):
        if not isinstance(other, ContentInfo):
            return NotImplemented
        return (self.content_type, self.encoding, self.is_known) == (other.content_type, other.encoding, other.is_known)

    def __repr__(self):
        return f"ContentInfo({self.content_type!r}, {self.encoding!r})"


class ManagedStream:
    """Wraps a provider stream so that closing it notifies its FileContent."""

    def __init__(self, raw, content: FileContent, for_write: bool):
        self._raw = raw
        self._content = content
        self._for_write = for_write
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def read(self, size: int = -1) -> bytes:
        return self._raw.read(size)

    def write(self, data: bytes) -> int:
        return self._raw.write(data)

    def close(self):
        if self._closed:
            return
        self._closed = True
        try:
            self._raw.close()
        finally:
            self._content._stream_closed(self)

    def __getattr__(self, item):
        return getattr(self._raw, item)

    def __iter__(self):
        return iter(self._raw)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class FileContent:

    def __init__(self, file: FileObject):
        self._file = file
        self._streams: list[ManagedStream] = []
        self._lock = threading.RLock()
        self._log = zrlog.get_logger("unifs.content")

    @property
    def file(self) -> FileObject:
        return self._file

    @property
    def is_open(self) -> bool:
        with self._lock:
            return bool(self._streams)

    def open_read(self) -> ManagedStream:
        """Open the file for reading."""
        file_type = self._file.get_type()
        if not file_type.exists:
            raise MissingFileError(f"Cannot read [{self._file}], it does not exist", 1500)
        if not file_type.has_content:
            raise WrongTypeError(f"Cannot read [{self._file}], it is a folder", 1501)
        if not self._file.is_readable():
            raise ReadOnlyError(f"Cannot read [{self._file}], it is not readable", 1502)
        return self._track(self._file._provider_call("open_read"), False)

    def open_write(self, append: bool = False) -> ManagedStream:
        """Open the file for writing, creating it and any missing folders above it."""
        file_type = self._file.get_type()
        if file_type == FileType.FOLDER:
            raise WrongTypeError(f"Cannot write to [{self._file}], it is a folder", 1503)
        parent = self._file.get_parent()
        if parent is not None:
            parent.create_folder()
        if not self._file.is_writeable():
            raise ReadOnlyError(f"Cannot write to [{self._file}], it is not writeable", 1504)
        return self._track(self._file._provider_call("open_write", append), True)

    def _track(self, raw, for_write: bool) -> ManagedStream:
        stream = ManagedStream(raw, self, for_write)
        with self._lock:
            self._streams.append(stream)
        return stream

    def _stream_closed(self, stream: ManagedStream):
        with self._lock:
            if stream in self._streams:
                self._streams.remove(stream)
        if stream._for_write:
            self._file.refresh()

    def read_bytes(self) -> bytes:
        with self.open_read() as stream:
            return stream.read()

    def read_chunks(self, buffer_size: int = None) -> t.Iterable[bytes]:
        with self.open_read() as stream:
            yield from read_in_chunks(stream, buffer_size or self._file.file_system.buffer_size)

    def write_bytes(self, data: bytes, append: bool = False) -> int:
        with self.open_write(append) as stream:
            stream.write(data)
        return len(data)

    def copy_to(self, other: FileContent) -> int:
        """Copy the content of this file into other, replacing what it held."""
        with self.open_read() as src:
            with other.open_write() as dest:
                return copy_stream(src, dest, self._file.file_system.buffer_size)

    def get_size(self) -> int:
        if not self._file.get_type().has_content:
            raise WrongTypeError(f"Cannot get the size of [{self._file}], it is not a file", 1505)
        return self._file._provider_call("get_size")

    def get_last_modified(self) -> datetime.datetime:
        if not self._file.exists():
            raise MissingFileError(f"Cannot get the modified time of [{self._file}], it does not exist", 1506)
        return self._file._provider_call("get_last_modified")

    def get_content_info(self) -> ContentInfo:
        info = self._file._provider_call("get_content_info")
        return info if info is not None else ContentInfo()

    def close(self):
        """Close every stream opened through this content. Safe to call repeatedly."""
        with self._lock:
            streams = list(self._streams)
        for stream in streams:
            self._log.debug(f"Closing stream left open on [{self._file}]")
            stream.close()
