import enum


class FileType(enum.Enum):
    """The kind of entry found at a file name."""

    FOLDER = "folder"
    FILE = "file"
    IMAGINARY = "imaginary"
    FILE_OR_FOLDER = "file_or_folder"

    @property
    def has_children(self) -> bool:
        return self in (FileType.FOLDER, FileType.FILE_OR_FOLDER)

    @property
    def has_content(self) -> bool:
        return self in (FileType.FILE, FileType.FILE_OR_FOLDER)

    @property
    def exists(self) -> bool:
        return self != FileType.IMAGINARY
