from __future__ import annotations
import datetime
import functools
import mimetypes
import typing as t

from unifs.content import ContentInfo
from unifs.exc import UnifsError, ProviderIOError, UnsupportedOperationError
from unifs.file_type import FileType
from unifs.names import FileName, NamePolicy, DEFAULT_POLICY


def wrap_provider_errors(cb):
    """Converts backend errors into ProviderIOErrors with recoverable set properly."""

    @functools.wraps(cb)
    def _inner(*args, **kwargs):
        try:
            return cb(*args, **kwargs)
        except UnifsError as ex:
            raise ex
        except FileNotFoundError as ex:
            raise ProviderIOError(f"File not found: {str(ex)}", 1302) from ex
        except PermissionError as ex:
            raise ProviderIOError(f"Access to file denied: {str(ex)}", 1303, True) from ex
        except IsADirectoryError as ex:
            raise ProviderIOError(f"File is a directory: {str(ex)}", 1304) from ex
        except NotADirectoryError as ex:
            raise ProviderIOError(f"Directory is not a directory: {str(ex)}", 1305) from ex
        except TimeoutError as ex:
            raise ProviderIOError(f"Timeout accessing file: {str(ex)}", 1306, True) from ex
        except Exception as ex:
            raise ProviderIOError(f"Exception from provider: {ex.__class__.__name__}: {str(ex)}", 1300) from ex

    return _inner


class FileProvider:
    """The capabilities a storage backend offers to the core.

        Subclasses override what their backend supports; anything left alone
        raises UnsupportedOperationError when an operation needs it. Providers
        are given names that already belong to their file system and never
        need to resolve paths themselves.
    """

    schemes: tuple[str, ...] = ()
    name_policy: NamePolicy = DEFAULT_POLICY

    def _unsupported(self, capability: str, name: FileName):
        raise UnsupportedOperationError(
            f"Provider [{self.__class__.__name__}] does not support {capability} on [{name}]", 1400
        )

    def probe_type(self, name: FileName) -> FileType:
        """Check what exists at the given name."""
        self._unsupported("probe_type", name)

    def list_child_names(self, name: FileName) -> list[str]:
        """List the base names of the children of a folder."""
        self._unsupported("list_child_names", name)

    def open_read(self, name: FileName) -> t.BinaryIO:
        self._unsupported("open_read", name)

    def open_write(self, name: FileName, append: bool = False) -> t.BinaryIO:
        self._unsupported("open_write", name)

    def is_readable(self, name: FileName) -> bool:
        return self.probe_type(name).exists

    def is_writeable(self, name: FileName) -> bool:
        return False

    def remove(self, name: FileName):
        self._unsupported("remove", name)

    def make_folder(self, name: FileName):
        self._unsupported("make_folder", name)

    def get_size(self, name: FileName) -> int:
        self._unsupported("get_size", name)

    def get_last_modified(self, name: FileName) -> datetime.datetime:
        self._unsupported("get_last_modified", name)

    def get_content_info(self, name: FileName) -> ContentInfo:
        """Guess the content type from the file name; override if the backend knows better."""
        content_type, encoding = mimetypes.guess_type(name.base_name, strict=False)
        return ContentInfo(content_type, encoding)

    def close(self):
        """Release any connections or handles held by the provider."""
        pass

    @classmethod
    def build(cls, root_name: FileName, options: t.Optional[dict] = None) -> FileProvider:
        """Construct a provider for the file system rooted at root_name."""
        return cls(**(options or {}))
