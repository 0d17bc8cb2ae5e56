"""
Field path resolution.

Paths are dot separated (``order.total``); a segment made only of digits is a
list index, and ``[n]`` suffixes are an alternate index notation, so
``"items[2].name"`` and ``"items.2.name"`` address the same value.

Absence is represented by the ``MISSING`` sentinel rather than ``None``,
because ``None`` is JSON ``null`` and therefore a real value.
"""

from typing import Any, List, Mapping, Union

PathToken = Union[str, int]


class _Missing:
    """Sentinel type for values that are absent from the data."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __reduce__(self):
        return (_Missing, ())


MISSING: Any = _Missing()


def tokenize_path(path: str) -> List[PathToken]:
    """
    Split a path into keys and list indices.

    Args:
        path: Path such as ``user.tags[1]`` or ``user.tags.1``

    Returns:
        List of tokens; digit-only segments become ints

    Example:
        >>> tokenize_path("a[2].b")
        ['a', 2, 'b']
    """
    tokens: List[PathToken] = []
    for segment in path.replace("[", ".").replace("]", ".").split("."):
        if not segment:
            continue
        tokens.append(int(segment) if segment.isdigit() and segment.isascii() else segment)
    return tokens


def resolve_path(root: Any, path: str) -> Any:
    """
    Resolve a path against nested data.

    Resolution stops with ``MISSING`` as soon as an intermediate value is
    None or missing, a key is absent, an index is out of range or the
    container does not support the kind of access the token asks for.

    Args:
        root: Data to resolve against
        path: Dotted/bracketed path

    Returns:
        The value found, or MISSING
    """
    current = root
    for token in tokenize_path(path):
        if current is None or current is MISSING:
            return MISSING
        if isinstance(current, Mapping):
            # Mapping keys are strings, even when they look like indices
            current = current.get(str(token), MISSING)
        elif isinstance(current, (list, tuple)) and isinstance(token, int):
            current = current[token] if token < len(current) else MISSING
        else:
            return MISSING
    return current


def parent_path(path: str) -> str:
    """
    Return the path of the object that holds ``path``.

    Everything before the last ``.`` is the parent; a path without a dot has
    the document root (``""``) as parent. ``"students[0].status"`` has parent
    ``"students[0]"``.
    """
    index = path.rfind(".")
    return path[:index] if index >= 0 else ""


def join_path(parent: str, key: str) -> str:
    """Build the path of ``key`` inside ``parent``."""
    return f"{parent}.{key}" if parent else key


def dependency_path(field: str, current_path: str) -> str:
    """
    Resolve the path a dependency refers to.

    A field containing a ``.`` is an absolute path from the document root.
    A bare name is a sibling of the current field.
    """
    if "." in field:
        return field
    return join_path(parent_path(current_path), field)
