"""In-memory file provider"""
from __future__ import annotations
import datetime
import io
import threading
import typing as t

from .base import FileProvider
from unifs.file_type import FileType
from unifs.names import FileName


class _MemoryEntry:

    def __init__(self, is_folder: bool):
        self.is_folder = is_folder
        self.data = b""
        self.children: dict[str, _MemoryEntry] = {}
        self.writeable = True
        self.modified = datetime.datetime.now(datetime.timezone.utc)

    def touch(self):
        self.modified = datetime.datetime.now(datetime.timezone.utc)


class _MemoryWriter(io.BytesIO):
    """Buffers writes and stores them in the entry when closed."""

    def __init__(self, provider: MemoryFileProvider, entry: _MemoryEntry, initial: bytes):
        super().__init__()
        self._provider = provider
        self._entry = entry
        self.write(initial)

    def close(self):
        if not self.closed:
            with self._provider._lock:
                self._entry.data = self.getvalue()
                self._entry.touch()
        super().close()


class MemoryFileProvider(FileProvider):
    """Provider that keeps a tree of files in memory.

        Children are listed in the order they were created. Any entry can be
        made read-only with set_writeable(), which is also inherited by new
        entries created below a read-only folder.
    """

    schemes = ("mem", "ram")

    def __init__(self):
        self._root = _MemoryEntry(True)
        self._lock = threading.RLock()

    def _find(self, segments: t.Iterable[str]) -> t.Optional[_MemoryEntry]:
        entry = self._root
        for segment in segments:
            if not entry.is_folder or segment not in entry.children:
                return None
            entry = entry.children[segment]
        return entry

    def _entry(self, name: FileName) -> _MemoryEntry:
        entry = self._find(name.segments)
        if entry is None:
            raise FileNotFoundError(f"No such entry: {name.path}")
        return entry

    def _parent_folder(self, name: FileName) -> _MemoryEntry:
        parent = self._find(name.segments[:-1])
        if parent is None:
            raise FileNotFoundError(f"No such folder: {name.parent.path}")
        if not parent.is_folder:
            raise NotADirectoryError(f"Not a folder: {name.parent.path}")
        return parent

    def set_writeable(self, path: str, writeable: bool):
        """Mark the entry at the given path (e.g. /a/b) as writeable or read-only."""
        with self._lock:
            entry = self._find(x for x in path.split("/") if x)
            if entry is None:
                raise FileNotFoundError(f"No such entry: {path}")
            entry.writeable = writeable

    def probe_type(self, name: FileName) -> FileType:
        with self._lock:
            entry = self._find(name.segments)
            if entry is None:
                return FileType.IMAGINARY
            return FileType.FOLDER if entry.is_folder else FileType.FILE

    def list_child_names(self, name: FileName) -> list[str]:
        with self._lock:
            entry = self._entry(name)
            if not entry.is_folder:
                raise NotADirectoryError(f"Not a folder: {name.path}")
            return list(entry.children.keys())

    def open_read(self, name: FileName) -> t.BinaryIO:
        with self._lock:
            entry = self._entry(name)
            if entry.is_folder:
                raise IsADirectoryError(f"Is a folder: {name.path}")
            return io.BytesIO(entry.data)

    def open_write(self, name: FileName, append: bool = False) -> t.BinaryIO:
        with self._lock:
            if not name.segments:
                raise IsADirectoryError(f"Is a folder: {name.path}")
            parent = self._parent_folder(name)
            entry = parent.children.get(name.base_name)
            if entry is None:
                entry = _MemoryEntry(False)
                entry.writeable = parent.writeable
                parent.children[name.base_name] = entry
                parent.touch()
            elif entry.is_folder:
                raise IsADirectoryError(f"Is a folder: {name.path}")
            if not entry.writeable:
                raise PermissionError(f"Read-only: {name.path}")
            return _MemoryWriter(self, entry, entry.data if append else b"")

    def is_readable(self, name: FileName) -> bool:
        with self._lock:
            return self._find(name.segments) is not None

    def is_writeable(self, name: FileName) -> bool:
        with self._lock:
            segments = name.segments
            entry = self._find(segments)
            while entry is None:
                segments = segments[:-1]
                entry = self._find(segments)
            return entry.writeable

    def remove(self, name: FileName):
        with self._lock:
            if not name.segments:
                raise PermissionError("The root folder cannot be removed")
            parent = self._parent_folder(name)
            entry = parent.children.get(name.base_name)
            if entry is None:
                raise FileNotFoundError(f"No such entry: {name.path}")
            if entry.is_folder and entry.children:
                raise OSError(f"Folder not empty: {name.path}")
            del parent.children[name.base_name]
            parent.touch()

    def make_folder(self, name: FileName):
        with self._lock:
            parent = self._parent_folder(name)
            if name.base_name in parent.children:
                raise FileExistsError(f"Already exists: {name.path}")
            entry = _MemoryEntry(True)
            entry.writeable = parent.writeable
            parent.children[name.base_name] = entry
            parent.touch()

    def get_size(self, name: FileName) -> int:
        with self._lock:
            return len(self._entry(name).data)

    def get_last_modified(self, name: FileName) -> datetime.datetime:
        with self._lock:
            return self._entry(name).modified
