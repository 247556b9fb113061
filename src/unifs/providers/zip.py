"""Read-only provider for ZIP archives"""
from __future__ import annotations
import datetime
import pathlib
import threading
import typing as t
import zipfile

from .base import FileProvider, wrap_provider_errors
from unifs.exc import ConfigError
from unifs.file_type import FileType
from unifs.names import FileName


class ZipFileProvider(FileProvider):
    """Exposes the entries of a ZIP archive as a read-only file system.

        Folders that are implied by entry paths but have no entry of their own
        are reported as folders too. The archive is opened on first use and
        released by close().
    """

    schemes = ("zip",)

    def __init__(self, archive: t.Union[str, pathlib.Path]):
        self._archive_path = pathlib.Path(archive)
        self._archive: t.Optional[zipfile.ZipFile] = None
        self._files: dict[tuple, zipfile.ZipInfo] = {}
        self._folders: dict[tuple, dict[str, None]] = {}
        self._lock = threading.Lock()

    @property
    def archive_path(self) -> pathlib.Path:
        return self._archive_path

    def _open(self) -> zipfile.ZipFile:
        with self._lock:
            if self._archive is None:
                archive = zipfile.ZipFile(self._archive_path, "r")
                self._folders = {(): {}}
                self._files = {}
                for info in archive.infolist():
                    parts = tuple(x for x in info.filename.split("/") if x)
                    if not parts:
                        continue
                    for i in range(0, len(parts)):
                        folder = parts[:i]
                        self._folders.setdefault(folder, {})
                        self._folders[folder][parts[i]] = None
                    if info.is_dir():
                        self._folders.setdefault(parts, {})
                    else:
                        self._files[parts] = info
                self._archive = archive
            return self._archive

    def _info(self, name: FileName) -> zipfile.ZipInfo:
        self._open()
        info = self._files.get(name.segments)
        if info is None:
            raise FileNotFoundError(f"No such entry in {self._archive_path.name}: {name.path}")
        return info

    @wrap_provider_errors
    def probe_type(self, name: FileName) -> FileType:
        self._open()
        if name.segments in self._folders:
            return FileType.FOLDER
        elif name.segments in self._files:
            return FileType.FILE
        return FileType.IMAGINARY

    @wrap_provider_errors
    def list_child_names(self, name: FileName) -> list[str]:
        self._open()
        if name.segments not in self._folders:
            raise NotADirectoryError(f"Not a folder in {self._archive_path.name}: {name.path}")
        return list(self._folders[name.segments].keys())

    @wrap_provider_errors
    def open_read(self, name: FileName) -> t.BinaryIO:
        info = self._info(name)
        return self._open().open(info, "r")

    @wrap_provider_errors
    def get_size(self, name: FileName) -> int:
        return self._info(name).file_size

    @wrap_provider_errors
    def get_last_modified(self, name: FileName) -> datetime.datetime:
        # entries carry no zone; they are reported as UTC like the other providers
        return datetime.datetime(*self._info(name).date_time, tzinfo=datetime.timezone.utc)

    @wrap_provider_errors
    def close(self):
        with self._lock:
            if self._archive is not None:
                self._archive.close()
                self._archive = None
                self._files = {}
                self._folders = {}

    @classmethod
    def build(cls, root_name: FileName, options: t.Optional[dict] = None) -> ZipFileProvider:
        options = options or {}
        if "archive" not in options:
            raise ConfigError(f"No archive configured for [{root_name}]", 1001)
        return cls(options["archive"])
