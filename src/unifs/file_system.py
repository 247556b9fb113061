from __future__ import annotations
import threading
import typing as t

import zrlog

from .exc import CrossFileSystemError, ResolutionError
from .file_object import FileObject
from .names import FileName, NameScope, resolve_name
from .providers.base import FileProvider, wrap_provider_errors
from .util import DEFAULT_CHUNK_SIZE


class FileSystem:
    """One backend instance and the FileObjects that belong to it.

        The file system owns the only mapping from names to FileObjects; every
        FileObject is obtained through resolve_or_create() so that a name always
        maps to the same instance. Entries are kept for the life of the file
        system. Building a FileObject never touches the provider.
    """

    def __init__(self, root_name: FileName, provider: FileProvider, buffer_size: int = None):
        if not root_name.absolute:
            raise ResolutionError(f"The root of a file system must be absolute, not [{root_name}]", 1104)
        self._root_name = root_name.root
        self._provider = provider
        self._buffer_size = buffer_size or DEFAULT_CHUNK_SIZE
        self._cache: dict[FileName, FileObject] = {}
        self._cache_lock = threading.Lock()
        self._log = zrlog.get_logger("unifs.file_system")

    def __str__(self):
        return self._root_name.friendly_uri

    def __contains__(self, name: FileName) -> bool:
        with self._cache_lock:
            return name in self._cache

    def __len__(self) -> int:
        with self._cache_lock:
            return len(self._cache)

    @property
    def root_name(self) -> FileName:
        return self._root_name

    @property
    def provider(self) -> FileProvider:
        return self._provider

    @property
    def buffer_size(self) -> int:
        return self._buffer_size

    def resolve_or_create(self, name: FileName) -> FileObject:
        """Get the FileObject for name, creating and caching it on first use."""
        if not self._root_name.same_file_system(name) or not name.absolute:
            raise CrossFileSystemError(f"Name [{name}] does not belong to file system [{self}]", 1105)
        with self._cache_lock:
            file = self._cache.get(name)
            if file is None:
                file = FileObject(name, self)
                self._cache[name] = file
            return file

    def resolve_file(self, path: t.Union[str, FileName], scope: NameScope = NameScope.FILE_SYSTEM) -> FileObject:
        """Find a file from a name or a path relative to the root."""
        if isinstance(path, FileName):
            return self.resolve_or_create(path)
        return self.resolve_or_create(resolve_name(self._root_name, path, scope))

    def get_root(self) -> FileObject:
        return self.resolve_or_create(self._root_name)

    @wrap_provider_errors
    def close(self):
        """Close every FileObject and then the provider; cached objects remain valid."""
        with self._cache_lock:
            files = list(self._cache.values())
        for file in files:
            file.close()
        self._provider.close()
        self._log.debug(f"Closed file system [{self}]")
