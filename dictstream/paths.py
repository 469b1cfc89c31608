#!/usr/bin/env python3
"""Path-addressed writes into a growing JSON tree, and cursor moves after them.

A path is a list of steps: a ``str`` is a pending object key, an ``int`` is
the next free slot of an array. Both helpers mutate their arguments in place.
"""
from typing import Any, List, Union

from dictstream.errors import EmptyPathError, InvalidPathError

Step = Union[str, int]
Path = List[Step]


def place(root: Union[dict, list], path: Path, value: Any) -> None:
    """Write ``value`` at ``path`` inside ``root``.

    Every step but the last must already exist in the tree. Arrays only grow
    by appending, so an integer step has to equal the array's length.

    Raises:
        EmptyPathError: ``path`` has no steps.
        InvalidPathError: a step does not match the node it addresses.
    """
    if not path:
        raise EmptyPathError("cannot place a value at an empty path")
    current = root
    for step in path[:-1]:
        try:
            current = current[step]
        except (KeyError, IndexError, TypeError):
            raise InvalidPathError(f"no container at step {step!r} of path {path!r}") from None
    last = path[-1]
    # bool is an int subclass and never a valid index
    if isinstance(current, list) and isinstance(last, int) and not isinstance(last, bool):
        if last != len(current):
            raise InvalidPathError(
                f"invalid path {path!r}: index {last} on array of length {len(current)}"
            )
        current.append(value)
    elif isinstance(current, dict) and isinstance(last, str):
        current[last] = value
    else:
        raise InvalidPathError(
            f"invalid path {path!r}: {type(current).__name__} cannot take step {last!r}"
        )


def advance(path: Path) -> None:
    """Move the cursor past the value or container that just completed."""
    if not path:
        return
    last = path.pop()
    if isinstance(last, int):
        path.append(last + 1)
