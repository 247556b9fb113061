"""Local file provider"""
from __future__ import annotations
import datetime
import os
import pathlib
import typing as t

from .base import FileProvider, wrap_provider_errors
from unifs.file_type import FileType
from unifs.names import FileName, NamePolicy


class LocalFileProvider(FileProvider):
    """Provider for files stored on a local disk or accessible network drive.

        Names map onto the host's paths, or onto paths below base_dir when one
        is given so that a directory can be exposed as a file system of its own.
    """

    schemes = ("file",)
    name_policy = NamePolicy(
        case_sensitive=os.path.normcase("A") == "A",
        alt_separators=("\\",) if os.sep == "\\" else ()
    )

    def __init__(self, base_dir: t.Union[str, pathlib.Path, None] = None):
        self._base_dir = pathlib.Path(base_dir).expanduser().absolute() if base_dir else None

    def local_path(self, name: FileName) -> pathlib.Path:
        """Get the host path for the given name."""
        if self._base_dir is not None:
            return self._base_dir.joinpath(*name.segments)
        if os.name == "nt" and name.segments and name.segments[0].endswith(":"):
            return pathlib.Path(name.segments[0] + "\\", *name.segments[1:])
        return pathlib.Path("/", *name.segments)

    @wrap_provider_errors
    def probe_type(self, name: FileName) -> FileType:
        path = self.local_path(name)
        if path.is_dir():
            return FileType.FOLDER
        elif path.exists():
            return FileType.FILE
        return FileType.IMAGINARY

    @wrap_provider_errors
    def list_child_names(self, name: FileName) -> list[str]:
        return sorted(x.name for x in self.local_path(name).iterdir())

    @wrap_provider_errors
    def open_read(self, name: FileName) -> t.BinaryIO:
        return open(self.local_path(name), "rb")

    @wrap_provider_errors
    def open_write(self, name: FileName, append: bool = False) -> t.BinaryIO:
        return open(self.local_path(name), "ab" if append else "wb")

    @wrap_provider_errors
    def is_readable(self, name: FileName) -> bool:
        path = self.local_path(name)
        return path.exists() and os.access(path, os.R_OK)

    @wrap_provider_errors
    def is_writeable(self, name: FileName) -> bool:
        path = self.local_path(name)
        while not path.exists():
            if path.parent == path:
                return False
            path = path.parent
        return os.access(path, os.W_OK)

    @wrap_provider_errors
    def remove(self, name: FileName):
        path = self.local_path(name)
        if path.is_dir():
            path.rmdir()
        else:
            path.unlink()

    @wrap_provider_errors
    def make_folder(self, name: FileName):
        self.local_path(name).mkdir()

    @wrap_provider_errors
    def get_size(self, name: FileName) -> int:
        return self.local_path(name).stat().st_size

    @wrap_provider_errors
    def get_last_modified(self, name: FileName) -> datetime.datetime:
        return datetime.datetime.fromtimestamp(
            self.local_path(name).stat().st_mtime,
            datetime.timezone(datetime.timedelta(hours=0), "UTC")
        )

    @classmethod
    def build(cls, root_name: FileName, options: t.Optional[dict] = None) -> LocalFileProvider:
        options = options or {}
        return cls(options.get("base_dir"))
