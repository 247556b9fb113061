"""The file object: one cached handle per name within a file system.

    A FileObject never stores its children; they are listed from the provider
    on demand and handed out through the file system's cache so that there is
    only ever one FileObject for a name. The type of the file is discovered
    lazily and kept until refresh() is called or an operation on this object
    changes it.
"""
from __future__ import annotations
import threading
import typing as t
import weakref

import zrlog

from .content import FileContent
from .exc import (
    FileSystemError, WrongTypeError, NotEmptyFolderError, ReadOnlyError, MissingFileError, UnifsError
)
from .file_type import FileType
from .names import FileName, NameScope, resolve_name
from .providers.base import wrap_provider_errors, FileProvider
from .selectors import FileSelector, SELECT_ALL
from .traversal import traverse, TraversalMode
from .util import HaltFlag

if t.TYPE_CHECKING:
    from .file_system import FileSystem


class FileObject:

    def __init__(self, name: FileName, file_system: FileSystem):
        self._name = name
        self._file_system = weakref.ref(file_system)
        self._type: t.Optional[FileType] = None
        self._content: t.Optional[FileContent] = None
        self._lock = threading.RLock()
        self._log = zrlog.get_logger("unifs.file")

    def __str__(self):
        return str(self._name)

    def __repr__(self):
        return f"FileObject({self._name.friendly_uri!r})"

    @property
    def name(self) -> FileName:
        return self._name

    @property
    def uri(self) -> str:
        return self._name.uri

    @property
    def file_system(self) -> FileSystem:
        fs = self._file_system()
        if fs is None:
            raise FileSystemError(f"The file system of [{self}] has been released", 1200)
        return fs

    @property
    def provider(self) -> FileProvider:
        return self.file_system.provider

    @wrap_provider_errors
    def _provider_call(self, capability: str, *args):
        return getattr(self.provider, capability)(self._name, *args)

    def get_type(self) -> FileType:
        """Get the type of the file, asking the provider only if it is not known."""
        with self._lock:
            if self._type is None:
                file_type = self._provider_call("probe_type")
                if not isinstance(file_type, FileType):
                    raise FileSystemError(f"Provider returned an invalid type for [{self}]: {file_type!r}", 1201)
                self._type = file_type
            return self._type

    def refresh(self):
        """Forget the cached type so that the next query asks the provider again."""
        with self._lock:
            self._type = None

    def _set_type(self, file_type: FileType):
        with self._lock:
            self._type = file_type

    def exists(self) -> bool:
        return self.get_type() != FileType.IMAGINARY

    def is_readable(self) -> bool:
        return bool(self._provider_call("is_readable"))

    def is_writeable(self) -> bool:
        return bool(self._provider_call("is_writeable"))

    def get_parent(self) -> t.Optional[FileObject]:
        """Get the folder holding this file, or None for the root of the file system."""
        parent_name = self._name.parent
        if parent_name is None:
            return None
        return self.file_system.resolve_or_create(parent_name)

    def _check_has_children(self, action: str):
        file_type = self.get_type()
        if not file_type.has_children:
            raise WrongTypeError(f"Cannot {action} of [{self}], it is not a folder ({file_type.value})", 1202)

    def get_child(self, name: str) -> t.Optional[FileObject]:
        """Get the child with the given base name, or None if the provider does not have it."""
        self._check_has_children("get a child")
        child = self.file_system.resolve_or_create(resolve_name(self._name, name, NameScope.CHILD))
        child.refresh()
        return child if child.exists() else None

    def get_children(self) -> list[FileObject]:
        """List the children of this folder, in the order the provider gives them."""
        self._check_has_children("list the children")
        fs = self.file_system
        children = []
        for child_name in self._provider_call("list_child_names"):
            child = fs.resolve_or_create(resolve_name(self._name, child_name, NameScope.CHILD))
            # listed by the provider, so a cached IMAGINARY type is stale
            with child._lock:
                if child._type == FileType.IMAGINARY:
                    child._type = None
            children.append(child)
        return children

    def resolve_file(self, path: str, scope: NameScope = NameScope.FILE_SYSTEM) -> FileObject:
        """Find another file on this file system, relative to this one."""
        return self.file_system.resolve_or_create(resolve_name(self._name, path, scope))

    def find_files(self, selector: FileSelector, halt_flag: HaltFlag = None) -> list[FileObject]:
        """Find the selected files at or below this one, children before their parents."""
        if not self.exists():
            return []
        return traverse(self, selector, TraversalMode.COLLECT, halt_flag=halt_flag)

    def delete(self, selector: t.Optional[FileSelector] = None, halt_flag: HaltFlag = None) -> t.Union[bool, int]:
        """Delete this file, or the selected files at or below it.

            Without a selector, deletes just this file and returns whether
            anything was deleted. With a selector, deletes every selected file,
            children first, and returns the number deleted. This is not
            transactional: the first failure stops the deletion and is raised,
            leaving files already deleted gone and the rest in place.
        """
        if selector is not None:
            if not self.exists():
                return 0
            self._log.info(f"Deleting selected files below [{self}]")
            try:
                return traverse(self, selector, TraversalMode.DELETE, halt_flag=halt_flag)
            except UnifsError:
                self._log.exception(f"Deletion below [{self}] stopped by an error")
                raise
        return self._delete_self()

    def _delete_self(self) -> bool:
        with self._lock:
            self.refresh()
            file_type = self.get_type()
            if file_type == FileType.IMAGINARY:
                return False
            if file_type.has_children and self._provider_call("list_child_names"):
                raise NotEmptyFolderError(f"Cannot delete [{self}], the folder is not empty", 1203)
            if not self.is_writeable():
                raise ReadOnlyError(f"Cannot delete [{self}], it is read-only", 1204)
            self.close()
            self._provider_call("remove")
            self._set_type(FileType.IMAGINARY)
            self._log.debug(f"Deleted [{self}]")
            return True

    def create_folder(self):
        """Create this folder and any missing folders above it."""
        with self._lock:
            file_type = self.get_type()
            if file_type.has_children:
                return
            if file_type != FileType.IMAGINARY:
                raise WrongTypeError(f"Cannot create folder [{self}], it exists as a {file_type.value}", 1205)
            self._create_parent_folders()
            self._provider_call("make_folder")
            self._set_type(FileType.FOLDER)
            self._log.debug(f"Created folder [{self}]")

    def create_file(self):
        """Create this file, empty, and any missing folders above it."""
        with self._lock:
            file_type = self.get_type()
            if file_type.has_content:
                return
            if file_type != FileType.IMAGINARY:
                raise WrongTypeError(f"Cannot create file [{self}], it exists as a {file_type.value}", 1206)
            self._create_parent_folders()
            self.get_content().write_bytes(b"")
            self._log.debug(f"Created file [{self}]")

    def _create_parent_folders(self):
        parent = self.get_parent()
        if parent is None:
            if not self.is_writeable():
                raise ReadOnlyError(f"Cannot create [{self}], the file system is read-only", 1207)
            return
        parent.create_folder()
        if not parent.is_writeable():
            raise ReadOnlyError(f"Cannot create [{self}], folder [{parent}] is read-only", 1208)

    def copy_from(self, source: FileObject, selector: FileSelector = SELECT_ALL, halt_flag: HaltFlag = None) -> int:
        """Replace this file with a copy of the selected files from source.

            If this file exists it is deleted first. Not transactional: the first
            failure stops the copy and is raised, leaving a partial copy behind.
            Returns the number of files copied.
        """
        if not source.exists():
            raise MissingFileError(f"Cannot copy from [{source}], it does not exist", 1209)
        parent = self.get_parent()
        if parent is not None and parent.exists() and not parent.is_writeable():
            raise ReadOnlyError(f"Cannot copy to [{self}], folder [{parent}] is read-only", 1210)
        if source.file_system is self.file_system and self._name.is_descendent(source.name, NameScope.DESCENDENT_OR_SELF):
            raise FileSystemError(f"Cannot copy [{source}] into itself at [{self}]", 1211)
        if source.file_system is self.file_system and source.name.is_descendent(self._name, NameScope.DESCENDENT):
            raise FileSystemError(f"Cannot replace [{self}] with a copy of [{source}], which is inside it", 1212)
        self.delete(SELECT_ALL)
        self._log.info(f"Copying [{source}] to [{self}]")
        try:
            return traverse(source, selector, TraversalMode.COPY, destination=self, halt_flag=halt_flag)
        except UnifsError:
            self._log.exception(f"Copy from [{source}] to [{self}] stopped by an error")
            raise

    def get_content(self) -> FileContent:
        """Get the content of this file; the file does not need to exist."""
        with self._lock:
            if self._content is None:
                self._content = FileContent(self)
            return self._content

    def close(self):
        """Release streams held for this file. The object stays usable."""
        with self._lock:
            content = self._content
        if content is not None:
            content.close()
