"""Depth-first walker shared by find_files(), delete(selector) and copy_from().

    Every folder's children are visited before the folder itself, so results
    come out in depthwise order (a child always precedes its parent). All three
    operations use the same walk and therefore see files in the same order.
"""
from __future__ import annotations
import enum
import typing as t

import zrlog

from .exc import MissingFileError
from .names import NameScope
from .selectors import FileSelector, FileSelectInfo, SELECT_ALL
from .util import HaltFlag

if t.TYPE_CHECKING:
    from .file_object import FileObject


class TraversalMode(enum.Enum):

    COLLECT = "collect"
    DELETE = "delete"
    COPY = "copy"


def walk(root: FileObject, selector: FileSelector, halt_flag: HaltFlag = None) -> t.Iterable[FileSelectInfo]:
    """Yield every selected file below (and including) root in depthwise order."""
    work = [(FileSelectInfo(root, root, 0), False)]
    while work:
        info, expanded = work.pop()
        if halt_flag is not None:
            halt_flag.check_continue(True)
        if expanded:
            if selector.include_file(info):
                yield info
            continue
        work.append((info, True))
        if info.file.get_type().has_children and selector.traverse_descendents(info):
            children = info.file.get_children()
            for child in reversed(children):
                work.append((FileSelectInfo(root, child, info.depth + 1), False))


def traverse(root: FileObject,
             selector: FileSelector,
             mode: TraversalMode = TraversalMode.COLLECT,
             destination: t.Optional[FileObject] = None,
             halt_flag: HaltFlag = None) -> t.Union[list, int]:
    """Apply the action for mode to every file selected below root.

        COLLECT returns the list of selected files. DELETE and COPY return the
        number of files acted on. The walk stops at the first error, which is
        raised to the caller; anything already deleted or copied stays that way.
    """
    if mode == TraversalMode.COPY and destination is None:
        raise ValueError("A destination is required to copy files")
    log = zrlog.get_logger("unifs.traversal")
    collected = []
    count = 0
    for info in walk(root, selector, halt_flag):
        if mode == TraversalMode.COLLECT:
            collected.append(info.file)
        elif mode == TraversalMode.DELETE:
            if info.file.delete():
                count += 1
        else:
            _copy_node(info, destination)
            count += 1
    if mode == TraversalMode.COLLECT:
        return collected
    log.debug(f"{mode.value} completed on {count} file(s) below [{root}]")
    return count


def _copy_node(info: FileSelectInfo, destination: FileObject):
    source = info.file
    target = destination.resolve_file(info.base_folder.name.relative_name(source.name), NameScope.DESCENDENT_OR_SELF)
    source_type = source.get_type()
    if not source_type.exists:
        raise MissingFileError(f"Cannot copy [{source}], it no longer exists", 1213)
    if target.exists() and target.get_type() != source_type:
        target.delete(SELECT_ALL)
    if source_type.has_content:
        source.get_content().copy_to(target.get_content())
    elif source_type.has_children:
        target.create_folder()
