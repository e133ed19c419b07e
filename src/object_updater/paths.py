"""
Path resolution for object updates.

A path is a list of keys (str for dict fields, int for list indices)
leading from the root of a tree to a target location. Selectors can be
given three ways:

    resolve_path(doc, lambda d: d["spec"]["template"])   # tracked access
    resolve_path(doc, ["spec", "template"])              # literal keys
    resolve_path(doc, "/spec/template")                  # JSON Pointer

All three yield ["spec", "template"].
"""

import logging
from typing import Any, Callable, Iterator, Optional, Union

from .models import PathKey
from .structures import is_record, is_sequence

logger = logging.getLogger(__name__)

Selector = Union[Callable[[Any], Any], list, tuple, str]

_MISSING = object()


class UnsupportedKeyKind(TypeError):
    """Raised when a selector reads a key that is not a str or int."""

    def __init__(self, key: Any):
        self.key = key
        super().__init__(
            f"Unsupported key {key!r} of type {type(key).__name__}; "
            "paths may only contain str and int keys"
        )


class PathNotWritable(ValueError):
    """Raised when a path key cannot address its container, e.g. a field name on a list."""

    def __init__(self, container: Any, key: Any):
        self.key = key
        super().__init__(
            f"Cannot write key {key!r} into {type(container).__name__}"
        )


def check_key(key: Any) -> PathKey:
    """
    Validate a single path key.

    Raises:
        UnsupportedKeyKind: If the key is not a plain str or int
    """
    if isinstance(key, bool) or not isinstance(key, (str, int)):
        raise UnsupportedKeyKind(key)
    return key


def _read(container: Any, key: PathKey, default: Any = None) -> Any:
    """Read one step, returning default instead of raising on a miss."""
    if is_record(container):
        return container.get(key, default)
    if is_sequence(container) and isinstance(key, int):
        if -len(container) <= key < len(container):
            return container[key]
    return default


class PathTracker:
    """
    Read-only view of a tree that records the path of every read.

    Nested dicts and lists are returned wrapped in a tracker that knows
    its own path, so chained reads extend it. Scalars and misses are
    returned unwrapped, which ends tracking on that branch.

    Iterating a tracked list yields tracked items and records each index
    read; iterating a tracked dict yields its keys without recording.
    """

    __slots__ = ("_value", "_path", "_reads")

    def __init__(self, value: Any, path: tuple = (), reads: Optional[list] = None):
        self._value = value
        self._path = path
        self._reads = reads if reads is not None else []

    @property
    def path(self) -> list[PathKey]:
        return list(self._path)

    @property
    def last_read(self) -> list[PathKey]:
        """Path of the most recent read through any tracker in this tree."""
        return list(self._reads[-1]) if self._reads else []

    def __getitem__(self, key: Any) -> Any:
        return self._track(key, None)

    def get(self, key: Any, default: Any = None) -> Any:
        return self._track(key, default)

    def _track(self, key: Any, default: Any) -> Any:
        path = self._path + (check_key(key),)
        self._reads.append(path)
        value = _read(self._value, key, _MISSING)
        if value is _MISSING:
            return default
        if is_record(value) or is_sequence(value):
            return PathTracker(value, path, self._reads)
        return value

    def __iter__(self) -> Iterator[Any]:
        if is_sequence(self._value):
            for index in range(len(self._value)):
                yield self._track(index, None)
        elif is_record(self._value):
            yield from list(self._value)

    def keys(self) -> list:
        return list(self._value) if is_record(self._value) else []

    def values(self) -> Iterator[Any]:
        for key in self.keys():
            yield self._track(key, None)

    def items(self) -> Iterator[tuple]:
        for key in self.keys():
            yield key, self._track(key, None)

    # Not recorded: these inspect the current level without descending.
    def __contains__(self, key: Any) -> bool:
        if is_record(self._value):
            return key in self._value
        return _read(self._value, key, _MISSING) is not _MISSING

    def __len__(self) -> int:
        return len(self._value)

    def __repr__(self) -> str:
        return f"PathTracker({self._value!r}, path={list(self._path)!r})"


def parse_path(root: Any, pointer: str) -> list[PathKey]:
    """
    Parse a JSON Pointer into path keys.

    Digit-only segments become ints when the container reached at that
    point is a list, so "/items/0" addresses the first list item. A "-"
    segment on a list becomes the index one past its end, so writing
    there appends.

    Args:
        root: Tree the pointer is evaluated against
        pointer: JSON Pointer (e.g., "/spec/containers/0/image")

    Returns:
        List of path keys (e.g., ["spec", "containers", 0, "image"])
    """
    if pointer in ("", "/"):
        return []

    keys: list[PathKey] = []
    current = root
    for raw in pointer[1:].split("/"):
        segment = raw.replace("~1", "/").replace("~0", "~")
        key: PathKey = segment
        if is_sequence(current):
            if segment.isdigit():
                key = int(segment)
            elif segment == "-":
                key = len(current)
        keys.append(key)
        current = _read(current, key)
    return keys


def resolve_path(root: Any, selector: Selector) -> list[PathKey]:
    """
    Resolve a selector into the list of keys it addresses.

    A callable selector resolves to the path of the tracked value it
    returns. If it returns a scalar or a miss, the path of its last read
    is used instead.

    Args:
        root: Tree to resolve against
        selector: Callable run once against a PathTracker, a list or tuple
            of keys, or a JSON Pointer string

    Returns:
        Path from the root to the selected location ([] for the root)

    Raises:
        UnsupportedKeyKind: If a key is not a str or int
    """
    if isinstance(selector, str):
        path = parse_path(root, selector)
    elif isinstance(selector, (list, tuple)):
        path = [check_key(key) for key in selector]
    elif callable(selector):
        tracker = PathTracker(root)
        selected = selector(tracker)
        if isinstance(selected, PathTracker):
            path = selected.path
        else:
            path = tracker.last_read
    else:
        raise TypeError(f"Unsupported selector: {type(selector).__name__}")

    logger.debug("Resolved path | path=%s", path)
    return list(path)


def get_value_at_path(obj: Any, path: list[PathKey]) -> Any:
    """
    Get value at a path.

    Args:
        obj: The object to traverse
        path: Path keys

    Returns:
        Value at the path, or None if any step is missing
    """
    current = obj
    for key in path:
        current = _read(current, key, _MISSING)
        if current is _MISSING:
            return None
    return current


def set_value_at_path(obj: Any, path: list[PathKey], value: Any) -> None:
    """
    Set value at a path, in place.

    Missing or scalar intermediates are replaced with a new container:
    a list when the following key is an int, a dict otherwise. Lists are
    padded with None up to the written index.

    Args:
        obj: The object to modify (must be a dict or list)
        path: Non-empty path keys
        value: New value

    Raises:
        PathNotWritable: If a key cannot address its container
    """
    if not path:
        raise ValueError("Cannot replace root object")

    current = obj
    for key, next_key in zip(path[:-1], path[1:]):
        child = _read(current, key)
        if not (is_record(child) or is_sequence(child)):
            child = [] if isinstance(next_key, int) else {}
            _write(current, key, child)
        current = child

    _write(current, path[-1], value)


def _write(container: Any, key: PathKey, value: Any) -> None:
    if is_sequence(container) and isinstance(key, int) and key >= -len(container):
        if key < 0:
            key += len(container)
        if key >= len(container):
            container.extend([None] * (key + 1 - len(container)))
        container[key] = value
    elif is_record(container):
        container[key] = value
    else:
        raise PathNotWritable(container, key)
