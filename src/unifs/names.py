"""File names and the rules for resolving one name against another.

    A FileName is an immutable, normalized representation of a location
    within a file system: scheme, authority (user, password, host, port) and
    the sequence of path segments below the root. Names never contain "."
    segments, and absolute names never contain "..".

    Names from different providers follow different rules (Windows paths are
    not case sensitive, archives use "/" regardless of the host OS, etc). These
    rules are captured in a NamePolicy given to the name when it is built;
    nothing here assumes a particular provider.
"""
from __future__ import annotations
import enum
import re
import typing as t
from urllib.parse import quote, unquote, urlsplit

from .exc import ParseError, ResolutionError, ScopeViolationError, InvalidAncestorError, CrossFileSystemError


_SCHEME_PATTERN = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):")
_BAD_ESCAPE_PATTERN = re.compile(r"%(?![0-9A-Fa-f]{2})")
_SEGMENT_SAFE_CHARS = "!$&'()*+,;=:@-._~"


class NameScope(enum.Enum):
    """How a resolved name must relate to the name it was resolved from."""

    FILE = "file"
    CHILD = "child"
    DESCENDENT = "descendent"
    DESCENDENT_OR_SELF = "descendent_or_self"
    FILE_SYSTEM = "file_system"


class NamePolicy:
    """Per-scheme rules for comparing and splitting paths."""

    def __init__(self, case_sensitive: bool = True, separator: str = "/", alt_separators: t.Iterable[str] = ()):
        self.case_sensitive = case_sensitive
        self.separator = separator
        self.alt_separators = tuple(alt_separators)

    def canonical_path(self, path: str) -> str:
        """Replace alternate separators with the main one."""
        for sep in self.alt_separators:
            path = path.replace(sep, self.separator)
        return path

    def split(self, path: str) -> list[str]:
        return self.canonical_path(path).split(self.separator)

    def segment_key(self, segment: str) -> str:
        return segment if self.case_sensitive else segment.casefold()

    def __repr__(self):
        return f"NamePolicy(case_sensitive={self.case_sensitive}, separator={self.separator!r})"


DEFAULT_POLICY = NamePolicy()


class FileName:
    """An immutable, normalized file name."""

    def __init__(self,
                 scheme: t.Optional[str],
                 segments: t.Iterable[str] = (),
                 host: t.Optional[str] = None,
                 port: t.Optional[int] = None,
                 user: t.Optional[str] = None,
                 password: t.Optional[str] = None,
                 absolute: bool = True,
                 policy: t.Optional[NamePolicy] = None):
        self._scheme = scheme.lower() if scheme else None
        self._host = host.lower() if host else None
        self._port = port
        self._user = user or None
        self._password = password or None
        self._segments = tuple(segments)
        self._absolute = absolute
        self._policy = policy or DEFAULT_POLICY
        self._key = (
            self._scheme,
            self._user,
            self._host,
            self._port,
            self._absolute,
            tuple(self._policy.segment_key(s) for s in self._segments)
        )

    @property
    def scheme(self) -> t.Optional[str]:
        return self._scheme

    @property
    def host(self) -> t.Optional[str]:
        return self._host

    @property
    def port(self) -> t.Optional[int]:
        return self._port

    @property
    def user(self) -> t.Optional[str]:
        return self._user

    @property
    def password(self) -> t.Optional[str]:
        return self._password

    @property
    def segments(self) -> tuple[str, ...]:
        return self._segments

    @property
    def absolute(self) -> bool:
        return self._absolute

    @property
    def policy(self) -> NamePolicy:
        return self._policy

    @property
    def depth(self) -> int:
        """Number of segments below the root."""
        return len(self._segments)

    @property
    def base_name(self) -> str:
        """The last segment of the name, or an empty string for the root."""
        return self._segments[-1] if self._segments else ""

    @property
    def extension(self) -> str:
        name = self.base_name
        pos = name.rfind(".")
        if pos <= 0:
            return ""
        return name[pos + 1:]

    @property
    def path(self) -> str:
        """The decoded path below the root, e.g. /folder/file.txt"""
        joined = "/".join(self._segments)
        return f"/{joined}" if self._absolute else joined

    def _authority(self, mask_password: bool) -> str:
        authority = ""
        if self._user:
            authority = quote(self._user, safe="")
            if self._password:
                authority += ":***" if mask_password else f":{quote(self._password, safe='')}"
            authority += "@"
        if self._host:
            authority += self._host
        if self._port is not None:
            authority += f":{self._port}"
        return authority

    def _root_uri(self, mask_password: bool) -> str:
        if self._scheme is None:
            return ""
        return f"{self._scheme}://{self._authority(mask_password)}"

    def _encoded_path(self) -> str:
        joined = "/".join(quote(s, safe=_SEGMENT_SAFE_CHARS) for s in self._segments)
        return f"/{joined}" if self._absolute else joined

    @property
    def root_uri(self) -> str:
        """The URI of the root of the file system this name belongs to."""
        return self._root_uri(False)

    @property
    def uri(self) -> str:
        """The full URI, including any credentials."""
        return self._root_uri(False) + self._encoded_path()

    @property
    def friendly_uri(self) -> str:
        """The full URI with the password masked, suitable for display and logging."""
        return self._root_uri(True) + self._encoded_path()

    @property
    def parent(self) -> t.Optional[FileName]:
        if not self._segments or self._segments[-1] == "..":
            return None
        return self.with_segments(self._segments[:-1])

    @property
    def root(self) -> FileName:
        return self.with_segments(())

    def with_segments(self, segments: t.Iterable[str]) -> FileName:
        """Build a name on the same file system with the given segments."""
        return FileName(
            self._scheme,
            segments,
            host=self._host,
            port=self._port,
            user=self._user,
            password=self._password,
            absolute=self._absolute,
            policy=self._policy,
        )

    def child(self, segment: str) -> FileName:
        return resolve_name(self, segment, NameScope.CHILD)

    def same_file_system(self, other: FileName) -> bool:
        return self._key[:4] == other._key[:4]

    def is_ancestor(self, other: FileName) -> bool:
        """Check if this name is a strict ancestor of other."""
        if not self.same_file_system(other) or self._absolute != other._absolute:
            return False
        if other.depth <= self.depth:
            return False
        return other._key[5][:self.depth] == self._key[5]

    def is_descendent(self, ancestor: FileName, scope: NameScope = NameScope.DESCENDENT) -> bool:
        """Check if this name relates to ancestor as required by scope."""
        if scope == NameScope.CHILD:
            return ancestor.is_ancestor(self) and self.depth == ancestor.depth + 1
        elif scope == NameScope.DESCENDENT:
            return ancestor.is_ancestor(self)
        elif scope == NameScope.DESCENDENT_OR_SELF:
            return self == ancestor or ancestor.is_ancestor(self)
        raise ValueError(f"Scope [{scope}] does not describe a descendent relationship")

    def relative_name(self, other: FileName) -> str:
        """Build the relative path that leads from this name to other."""
        if not self.same_file_system(other):
            raise CrossFileSystemError(f"Names [{self}] and [{other}] are on different file systems", 1101)
        mine = self._key[5]
        theirs = other._key[5]
        common = 0
        while common < len(mine) and common < len(theirs) and mine[common] == theirs[common]:
            common += 1
        parts = [".."] * (len(mine) - common)
        parts.extend(other.segments[common:])
        return "/".join(parts) if parts else "."

    def __eq__(self, other):
        if not isinstance(other, FileName):
            return NotImplemented
        return self._key == other._key

    def __hash__(self):
        return hash(self._key)

    def __str__(self):
        return self.friendly_uri

    def __repr__(self):
        return f"FileName({self.friendly_uri!r})"


def _normalize_segments(parts: t.Iterable[str], absolute: bool, original: str, error_cls=InvalidAncestorError) -> list[str]:
    result = []
    for part in parts:
        if part == "" or part == ".":
            continue
        if part == "..":
            if result and result[-1] != "..":
                result.pop()
            elif absolute:
                raise error_cls(f"Path [{original}] refers to a location above the file system root", 1001)
            else:
                result.append(part)
        else:
            result.append(part)
    return result


def _decode_segments(path: str, original: str) -> list[str]:
    if _BAD_ESCAPE_PATTERN.search(path):
        raise ParseError(f"Malformed percent escape in [{original}]", 1002)
    return [unquote(x) for x in path.split("/")]


def _is_uri(path: str) -> bool:
    match = _SCHEME_PATTERN.match(path)
    return match is not None and path[match.end():].startswith("/")


def _parse_uri(uri: str, policy: NamePolicy) -> FileName:
    match = _SCHEME_PATTERN.match(uri)
    scheme = match.group(1)
    rest = uri[match.end():]
    host = port = user = password = None
    if rest.startswith("//"):
        slash = rest.find("/", 2)
        authority = rest[2:] if slash < 0 else rest[2:slash]
        rest = "/" if slash < 0 else rest[slash:]
        if authority:
            try:
                parts = urlsplit(f"{scheme}://{authority}")
                host = parts.hostname
                port = parts.port
            except ValueError as ex:
                raise ParseError(f"Invalid authority in [{uri}]: {str(ex)}", 1003) from ex
            if parts.username is not None:
                user = unquote(parts.username)
            if parts.password is not None:
                password = unquote(parts.password)
    elif not rest.startswith("/"):
        raise ParseError(f"URI [{uri}] does not contain an absolute path", 1004)
    segments = _normalize_segments(_decode_segments(rest, uri), True, uri, ParseError)
    return FileName(scheme, segments, host=host, port=port, user=user, password=password, policy=policy)


def extract_scheme(uri: str) -> t.Optional[str]:
    """Get the scheme of a URI, or None for a plain path."""
    match = _SCHEME_PATTERN.match(uri)
    if match is None or not uri[match.end():].startswith("/"):
        return None
    return match.group(1).lower()


def parse_name(uri: str, policy: t.Optional[NamePolicy] = None, default_scheme: t.Optional[str] = None) -> FileName:
    """Parse a URI or path into a normalized FileName.

        Full URIs (scheme://authority/path) are percent-decoded. Plain paths are
        taken literally; absolute plain paths need a default scheme, relative
        plain paths produce a relative name.
    """
    if not isinstance(uri, str) or uri == "":
        raise ParseError(f"Cannot parse an empty name", 1000)
    if "\x00" in uri:
        raise ParseError(f"Name [{uri!r}] contains a NUL character", 1005)
    policy = policy or DEFAULT_POLICY
    path = policy.canonical_path(uri)
    if _is_uri(path):
        return _parse_uri(path, policy)
    if path.startswith(policy.separator):
        if default_scheme is None:
            raise ParseError(f"Absolute path [{uri}] has no scheme", 1006)
        return FileName(default_scheme, _normalize_segments(policy.split(path), True, uri, ParseError), policy=policy)
    return FileName(None, _normalize_segments(policy.split(path), False, uri), absolute=False, policy=policy)


def resolve_name(base: FileName, path: str, scope: NameScope = NameScope.FILE_SYSTEM) -> FileName:
    """Resolve path against base, checking that the result is within scope.

        An empty path resolves to base. A path starting with the root marker
        replaces base's path; anything else is appended to it. A URI on a
        different file system is never accepted.
    """
    if path is None or path == "":
        return base
    if not base.absolute:
        raise ResolutionError(f"Cannot resolve [{path}] against relative name [{base}]", 1100)
    if "\x00" in path:
        raise ParseError(f"Path [{path!r}] contains a NUL character", 1005)
    policy = base.policy
    path = policy.canonical_path(path)
    if _is_uri(path):
        target = _parse_uri(path, policy)
        if not base.same_file_system(target):
            raise CrossFileSystemError(f"Path [{target}] is not on the file system of [{base}]", 1102)
        parts = list(target.segments)
    elif path.startswith(policy.separator):
        parts = policy.split(path)
    else:
        parts = list(base.segments)
        parts.extend(policy.split(path))
    result = base.with_segments(_normalize_segments(parts, True, path))
    _check_scope(base, result, scope, path)
    return result


def _check_scope(base: FileName, result: FileName, scope: NameScope, path: str):
    if scope == NameScope.FILE:
        in_scope = result == base
    elif scope == NameScope.FILE_SYSTEM:
        in_scope = True
    else:
        in_scope = result.is_descendent(base, scope)
    if not in_scope:
        raise ScopeViolationError(f"Path [{path}] resolved to [{result}], outside of scope {scope.name} of [{base}]", 1103)
