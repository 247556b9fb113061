"""
    Provides a single object model for files, whatever they are stored on.

    A FileSystem wraps one provider (local disk, memory, a ZIP archive...) and
    hands out FileObjects, one per file name. FileObjects are cheap to obtain:
    nothing is asked of the provider until a question about the file is asked
    (does it exist? what are its children?) and the answer is cached until the
    file is changed through unifs or refresh() is called.

    Paths are resolved with resolve_file() against another file under a
    NameScope, which limits where the result may land (the same file, a
    direct child, any descendent or anywhere on the file system). Scopes are
    checked after "." and ".." are removed, so a path cannot escape its scope
    by walking up and back down.

    Multi-file operations (find_files(), delete(selector), copy_from()) are
    driven by FileSelectors and always visit children before their parents.
    They are not transactional: they stop at the first error and raise it,
    leaving what was already done in place.

    Most callers will start from the FileSystemManager:

        manager = FileSystemManager()
        folder = manager.resolve_file("file:///tmp/data")
        for file in folder.find_files(SELECT_FILES):
            ...
"""
from .exc import (
    UnifsError, FileSystemError, ParseError, ResolutionError, ScopeViolationError, InvalidAncestorError,
    CrossFileSystemError, WrongTypeError, NotEmptyFolderError, ReadOnlyError, MissingFileError,
    UnsupportedOperationError, ProviderIOError, ConfigError
)
from .file_type import FileType
from .names import FileName, NamePolicy, NameScope, parse_name, resolve_name
from .selectors import (
    FileSelectInfo, FileSelector, AllFileSelector, FileDepthSelector, FileTypeSelector, PatternFileSelector,
    FileFilterSelector, SELECT_ALL, SELECT_SELF, SELECT_SELF_AND_CHILDREN, SELECT_CHILDREN, EXCLUDE_SELF,
    SELECT_FILES, SELECT_FOLDERS
)
from .traversal import TraversalMode, traverse
from .content import FileContent, ContentInfo
from .file_object import FileObject
from .file_system import FileSystem
from .manager import FileSystemManager
