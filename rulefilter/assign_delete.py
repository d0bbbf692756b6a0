"""The ``del`` assignment: remove a key at a dotted path."""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any

from .assignment import Assignment, _type_name, register, resolve_path
from .errors import AssignmentError


class DeleteAssignment(Assignment):
    """Remove a key from a mapping.

    Data with a ``delete(key, value)`` method handles the removal itself.
    """

    name = "del"

    def run(self, ctx: Any, data: Any, key: str, value: Any) -> None:
        deleter = getattr(data, "delete", None)
        if callable(deleter) and not isinstance(data, type):
            deleter(key, value)
            return

        origin = data
        prefix, _, last = key.rpartition(".")
        try:
            target = resolve_path(data, prefix)
        except LookupError:
            raise AssignmentError(
                f"[{self.name}] assignment {_type_name(origin)} not exists key {prefix}"
            ) from None

        if target is None:
            raise AssignmentError(f"[{self.name}] assignment data is None")

        if not isinstance(target, MutableMapping):
            raise AssignmentError(
                f"[{self.name}] assignment not supported {_type_name(origin)}"
            )
        target.pop(last, None)


register(DeleteAssignment())