from unifs import FileSystem, NamePolicy, parse_name
from unifs.providers import MemoryFileProvider


class RecordingProvider(MemoryFileProvider):
    """Memory provider that remembers what it was asked to do."""

    def __init__(self):
        super().__init__()
        self.removed = []
        self.probes = 0

    def probe_type(self, name):
        self.probes += 1
        return super().probe_type(name)

    def remove(self, name):
        super().remove(name)
        self.removed.append(name.path)


def memory_file_system(uri: str = "mem:///", policy: NamePolicy = None, provider=None):
    provider = provider or RecordingProvider()
    return FileSystem(parse_name(uri, policy), provider), provider


def write_tree(fs: FileSystem, files: dict, folders=()):
    for path in files:
        fs.resolve_file(path).get_content().write_bytes(files[path])
    for path in folders:
        fs.resolve_file(path).create_folder()


SAMPLE_FILES = {
    "/top/a.txt": b"A",
    "/top/sub/b.txt": b"BB",
    "/top/sub/deep/c.log": b"CCC",
}
SAMPLE_FOLDERS = ("/top/empty",)
SAMPLE_ORDER = [
    "/top/a.txt",
    "/top/sub/b.txt",
    "/top/sub/deep/c.log",
    "/top/sub/deep",
    "/top/sub",
    "/top/empty",
    "/top",
]
