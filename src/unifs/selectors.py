"""Selectors decide which files a multi-file operation acts on.

    Each visited file is described by a FileSelectInfo: the folder the
    operation started from, the file itself and its depth (0 for the starting
    folder). include_file() decides if the file is acted on, and
    traverse_descendents() is asked once per folder, before its children are
    visited, whether to descend into it. The two are independent: a folder can
    be excluded while its children are still visited, and vice versa.
"""
from __future__ import annotations
import fnmatch
import typing as t

from .file_type import FileType

if t.TYPE_CHECKING:
    from .file_object import FileObject


class FileSelectInfo:

    def __init__(self, base_folder: FileObject, file: FileObject, depth: int):
        self.base_folder = base_folder
        self.file = file
        self.depth = depth

    def __repr__(self):
        return f"FileSelectInfo({self.file.name!r}, depth={self.depth})"


class FileSelector:
    """Base selector, override both methods."""

    def include_file(self, info: FileSelectInfo) -> bool:
        raise NotImplementedError

    def traverse_descendents(self, info: FileSelectInfo) -> bool:
        raise NotImplementedError


class AllFileSelector(FileSelector):
    """Selects every file and visits every folder."""

    def include_file(self, info: FileSelectInfo) -> bool:
        return True

    def traverse_descendents(self, info: FileSelectInfo) -> bool:
        return True


class FileDepthSelector(FileSelector):
    """Selects files whose depth is between min_depth and max_depth, inclusive."""

    def __init__(self, min_depth: int = 0, max_depth: t.Optional[int] = None):
        self.min_depth = min_depth
        self.max_depth = max_depth

    def include_file(self, info: FileSelectInfo) -> bool:
        if info.depth < self.min_depth:
            return False
        return self.max_depth is None or info.depth <= self.max_depth

    def traverse_descendents(self, info: FileSelectInfo) -> bool:
        return self.max_depth is None or info.depth < self.max_depth


class FileTypeSelector(FileSelector):
    """Selects files of one type, visiting every folder."""

    def __init__(self, file_type: FileType):
        self.file_type = file_type

    def include_file(self, info: FileSelectInfo) -> bool:
        return info.file.get_type() == self.file_type

    def traverse_descendents(self, info: FileSelectInfo) -> bool:
        return True


class PatternFileSelector(FileSelector):
    """Selects files whose base name matches a shell-style pattern."""

    def __init__(self, pattern: str, case_sensitive: bool = True):
        self.pattern = pattern if case_sensitive else pattern.lower()
        self.case_sensitive = case_sensitive

    def include_file(self, info: FileSelectInfo) -> bool:
        name = info.file.name.base_name
        if not self.case_sensitive:
            return fnmatch.fnmatchcase(name.lower(), self.pattern)
        return fnmatch.fnmatchcase(name, self.pattern)

    def traverse_descendents(self, info: FileSelectInfo) -> bool:
        return True


class FileFilterSelector(FileSelector):
    """Selects files accepted by a callable, visiting every folder."""

    def __init__(self, filter_fn: t.Callable[[FileSelectInfo], bool]):
        self._filter = filter_fn

    def include_file(self, info: FileSelectInfo) -> bool:
        return bool(self._filter(info))

    def traverse_descendents(self, info: FileSelectInfo) -> bool:
        return True


SELECT_ALL = AllFileSelector()
SELECT_SELF = FileDepthSelector(0, 0)
SELECT_SELF_AND_CHILDREN = FileDepthSelector(0, 1)
SELECT_CHILDREN = FileDepthSelector(1, 1)
EXCLUDE_SELF = FileDepthSelector(1)
SELECT_FILES = FileTypeSelector(FileType.FILE)
SELECT_FOLDERS = FileTypeSelector(FileType.FOLDER)
