import importlib
import typing as t

from .exc import UnifsError


DEFAULT_CHUNK_SIZE = 4194304


class HaltInterrupt(KeyboardInterrupt):
    pass


class HaltFlag(t.Protocol):

    def check_continue(self, raise_ex: bool = True) -> bool:
        if not self._should_continue():
            if raise_ex:
                raise HaltInterrupt()
            return False
        return True

    def _should_continue(self) -> bool:
        raise NotImplementedError()


class DynamicObjectLoadError(UnifsError):
    pass


def dynamic_object(cls_name):
    """Load an object from a dotted path such as ``package.module.ClassName``."""
    if "." not in cls_name:
        raise DynamicObjectLoadError(f"cls_name should be in format package.class [actual {cls_name}]", "DOBJ", 1000)
    package_dot_pos = cls_name.rfind(".")
    package = cls_name[0:package_dot_pos]
    specific_cls_name = cls_name[package_dot_pos + 1:]
    try:
        mod = importlib.import_module(package)
        return getattr(mod, specific_cls_name)
    except ModuleNotFoundError as ex:
        raise DynamicObjectLoadError(f"Package or module [{package}] not found", "DOBJ", 1001) from ex
    except AttributeError as ex:
        raise DynamicObjectLoadError(f"Object [{specific_cls_name}] not found in [{package}]", "DOBJ", 1002) from ex


def read_in_chunks(readable, buffer_size: int = None, halt_flag: HaltFlag = None) -> t.Iterable[bytes]:
    """Read in chunks from a readable object until it is exhausted."""
    if buffer_size is None:
        buffer_size = DEFAULT_CHUNK_SIZE
    if halt_flag:
        halt_flag.check_continue(True)
    x = readable.read(buffer_size)
    while x:
        yield x
        if halt_flag:
            halt_flag.check_continue(True)
        x = readable.read(buffer_size)


def copy_stream(readable, writable, buffer_size: int = None, halt_flag: HaltFlag = None) -> int:
    """Copy everything from readable into writable, returning the number of bytes copied."""
    total = 0
    for chunk in read_in_chunks(readable, buffer_size, halt_flag):
        writable.write(chunk)
        total += len(chunk)
    return total
