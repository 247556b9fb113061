from __future__ import annotations
import pathlib
import threading
import typing as t

import zirconium as zr
import zrlog
from autoinject import injector

from .exc import UnsupportedOperationError, ResolutionError
from .file_object import FileObject
from .file_system import FileSystem
from .names import FileName, parse_name, extract_scheme
from .providers import FileProvider, LocalFileProvider, MemoryFileProvider, ZipFileProvider
from .util import dynamic_object, DEFAULT_CHUNK_SIZE


@zr.configure
def _register_config(config: zr.ApplicationConfig):
    config.register_file(pathlib.Path("~").expanduser().absolute() / ".unifs.toml")
    config.register_file("./.unifs.toml")


@injector.injectable_global
class FileSystemManager:
    """Finds the provider for a URI and keeps one FileSystem per root.

        file://PATH -> LocalFileProvider
        mem://HOST/PATH, ram://HOST/PATH -> MemoryFileProvider
        zip://HOST/PATH -> ZipFileProvider (archive set in [unifs.options.zip])
        (plain path) -> default scheme, normally file

        Extra providers are registered in the configuration as
        [unifs.providers] SCHEME = "package.module.ProviderClass", and options
        for a provider's build() method are read from [unifs.options.SCHEME].
    """

    config: zr.ApplicationConfig = None

    @injector.construct
    def __init__(self):
        self._log = zrlog.get_logger("unifs.manager")
        self._providers: dict[str, type[FileProvider]] = {}
        self._file_systems: dict[FileName, FileSystem] = {}
        self._lock = threading.Lock()
        self.default_scheme = self.config.as_str(("unifs", "default_scheme"), default="file")
        self.buffer_size = self.config.as_int(("unifs", "buffer_size"), default=DEFAULT_CHUNK_SIZE)
        for provider_cls in (LocalFileProvider, MemoryFileProvider, ZipFileProvider):
            for scheme in provider_cls.schemes:
                self.register_provider(scheme, provider_cls)
        extra_providers = self.config.as_dict(("unifs", "providers"), default={})
        for scheme in extra_providers:
            self.register_provider(scheme, dynamic_object(extra_providers[scheme]))

    def register_provider(self, scheme: str, provider_cls: type[FileProvider]):
        """Use provider_cls for every file system with the given scheme."""
        with self._lock:
            self._providers[scheme.lower()] = provider_cls
        self._log.debug(f"Registered provider [{provider_cls.__name__}] for scheme [{scheme}]")

    def has_provider(self, scheme: str) -> bool:
        with self._lock:
            return scheme.lower() in self._providers

    def schemes(self) -> list[str]:
        with self._lock:
            return sorted(self._providers.keys())

    def _provider_class(self, scheme: str) -> type[FileProvider]:
        with self._lock:
            if scheme not in self._providers:
                raise UnsupportedOperationError(f"No provider registered for scheme [{scheme}]", 1401)
            return self._providers[scheme]

    def parse(self, uri: str) -> FileName:
        """Parse a URI using the naming rules of its provider."""
        scheme = extract_scheme(uri) or self.default_scheme
        provider_cls = self._provider_class(scheme)
        name = parse_name(uri, provider_cls.name_policy, self.default_scheme)
        if not name.absolute and scheme == "file":
            local_path = pathlib.Path(uri).absolute().as_posix()
            if not local_path.startswith("/"):
                local_path = f"/{local_path}"
            name = parse_name(local_path, provider_cls.name_policy, "file")
        return name

    def resolve_file(self, uri: t.Union[str, pathlib.Path], base: t.Optional[FileObject] = None) -> FileObject:
        """Find the file for a URI or path; plain relative paths resolve against base when given."""
        if isinstance(uri, pathlib.Path):
            uri = uri.absolute().as_posix()
        if base is not None and extract_scheme(uri) is None:
            return base.resolve_file(uri)
        name = self.parse(uri)
        if not name.absolute:
            raise ResolutionError(f"Cannot resolve relative path [{uri}] without a base file", 1106)
        return self.get_file_system(name).resolve_or_create(name)

    def get_file_system(self, name: FileName) -> FileSystem:
        """Get the file system that name belongs to, building its provider on first use."""
        root = name.root
        provider_cls = self._provider_class(root.scheme)
        with self._lock:
            if root not in self._file_systems:
                options = self.config.as_dict(("unifs", "options", root.scheme), default={})
                self._file_systems[root] = FileSystem(root, provider_cls.build(root, options), self.buffer_size)
                self._log.info(f"Opened file system [{root}] with [{provider_cls.__name__}]")
            return self._file_systems[root]

    def close(self):
        """Close every file system opened by this manager."""
        with self._lock:
            file_systems = list(self._file_systems.values())
        for fs in file_systems:
            fs.close()
