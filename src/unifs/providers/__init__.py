from .base import FileProvider, wrap_provider_errors
from .local import LocalFileProvider
from .memory import MemoryFileProvider
from .zip import ZipFileProvider
