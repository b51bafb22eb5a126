"""Dependency trees - the nested naming structure a task declares.

A tree maps string keys to either a Task or another DependencyTree, to any
depth. Plain dicts are converted on construction, so resolvers get the same
shape back in ``deps`` and artifact result trees mirror it exactly.

Example:
    >>> tree = DependencyTree.coerce({
    ...     "user": fetch_user,
    ...     "extras": {"orders": fetch_orders, "user_again": fetch_user},
    ... })
    >>> [t.id for t in tree.iter_tasks()]  # duplicates kept, dedup happens later
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from weft.core.task import Task

DependencyEntry = Union["Task", "DependencyTree"]


class DependencyTree:
    """Immutable mapping of keys to tasks or nested trees.

    Entries are a tagged variant: each value is exactly a ``Task`` or a
    ``DependencyTree``. Anything else is rejected when the tree is built.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, Any] | None = None) -> None:
        from weft.core.task import Task

        converted: dict[str, DependencyEntry] = {}
        for key, value in (entries or {}).items():
            if not isinstance(key, str):
                raise TypeError(f"Dependency keys must be strings, got {type(key).__name__}")
            if isinstance(value, (Task, DependencyTree)):
                converted[key] = value
            elif isinstance(value, Mapping):
                converted[key] = DependencyTree(value)
            else:
                raise TypeError(
                    f"Dependency '{key}' must be a Task or a mapping of tasks, "
                    f"got {type(value).__name__}"
                )
        self._entries = converted

    @classmethod
    def coerce(cls, value: DependencyTree | Mapping[str, Any] | None) -> DependencyTree:
        """Return ``value`` as a DependencyTree, converting mappings and None."""
        if isinstance(value, DependencyTree):
            return value
        return cls(value)

    def __getitem__(self, key: str) -> DependencyEntry:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def items(self) -> Iterator[tuple[str, DependencyEntry]]:
        return iter(self._entries.items())

    def is_empty(self) -> bool:
        return not self._entries

    def iter_tasks(self) -> Iterator[Task]:
        """Yield every task leaf, depth first. A shared task is yielded once per path."""
        for _, task in self.iter_leaves():
            yield task

    def iter_leaves(self, prefix: tuple[str, ...] = ()) -> Iterator[tuple[tuple[str, ...], Task]]:
        """Yield ``(path, task)`` for every task leaf."""
        # Explicit stack keeps deep nesting off the call stack
        stack: list[tuple[tuple[str, ...], DependencyTree]] = [(prefix, self)]
        while stack:
            path, tree = stack.pop()
            pending: list[tuple[tuple[str, ...], DependencyTree]] = []
            for key, entry in tree.items():
                if isinstance(entry, DependencyTree):
                    pending.append(((*path, key), entry))
                else:
                    yield (*path, key), entry
            stack.extend(reversed(pending))

    def map_tasks(self, fn: Callable[[Task], Any]) -> dict[str, Any]:
        """Return a nested dict of this tree's shape with ``fn(task)`` at each leaf."""
        result: dict[str, Any] = {}
        for key, entry in self.items():
            if isinstance(entry, DependencyTree):
                result[key] = entry.map_tasks(fn)
            else:
                result[key] = fn(entry)
        return result

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DependencyTree):
            return self._entries == other._entries
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        inner = ", ".join(f"{key!r}: {entry!r}" for key, entry in self.items())
        return f"DependencyTree({{{inner}}})"
