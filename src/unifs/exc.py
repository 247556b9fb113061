class UnifsError(Exception):
    """Super-type of all errors raised by unifs code"""

    def __init__(self, msg: str, code_space: str = "GEN", code_number: int = None, is_recoverable: bool = False):
        self.internal_code = "" if code_number is None else f"{code_space}-{code_number}"
        super().__init__(f"{msg} [{self.internal_code}]")
        self.is_recoverable = is_recoverable


class FileSystemError(UnifsError):
    """Error class for anything raised by a file operation."""

    def __init__(self, msg, code_number: int = None, is_recoverable: bool = False):
        super().__init__(msg, "VFS", code_number, is_recoverable=is_recoverable)


class ParseError(FileSystemError):
    """The path or URI could not be parsed."""
    pass


class ResolutionError(FileSystemError):
    """A path could not be resolved against its base name."""
    pass


class ScopeViolationError(ResolutionError):
    pass


class InvalidAncestorError(ResolutionError):
    pass


class CrossFileSystemError(ResolutionError):
    pass


class WrongTypeError(FileSystemError):
    """The file exists but is not of the type the operation requires."""
    pass


class NotEmptyFolderError(FileSystemError):
    pass


class ReadOnlyError(FileSystemError):
    pass


class MissingFileError(FileSystemError):
    pass


class UnsupportedOperationError(FileSystemError):
    """The provider does not implement the capability the operation needs."""
    pass


class ProviderIOError(FileSystemError):
    """Wraps a failure raised by the backing storage."""
    pass


class ConfigError(UnifsError):
    """The configuration is missing a value or holds an invalid one."""

    def __init__(self, msg, code_number: int = None):
        super().__init__(msg, "CONFIG", code_number)
