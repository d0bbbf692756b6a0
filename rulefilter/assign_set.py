"""The ``=`` assignment: write a value at a dotted path."""

from __future__ import annotations

from collections.abc import MutableMapping, MutableSequence
from typing import Any

from .assignment import (
    Assignment,
    _attribute_name,
    _is_record,
    _parse_index,
    _type_name,
    register,
    resolve_path,
)
from .errors import AssignmentError


class SetAssignment(Assignment):
    """Set a mapping key, list element or object attribute.

    Data with a ``set(key, value)`` method handles the assignment itself.
    """

    name = "="

    def run(self, ctx: Any, data: Any, key: str, value: Any) -> None:
        setter = getattr(data, "set", None)
        if callable(setter) and not isinstance(data, type):
            setter(key, value)
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

        if isinstance(target, MutableMapping):
            target[last] = value
        elif isinstance(target, MutableSequence):
            self._set_item(origin, target, last, value)
        elif _is_record(target):
            attribute = _attribute_name(target, last)
            if attribute is None:
                raise AssignmentError(
                    f"[{self.name}] {_type_name(origin)} path value not exists key {last}"
                )
            setattr(target, attribute, value)
        else:
            raise AssignmentError(
                f"[{self.name}] assignment not supported {_type_name(origin)}"
            )

    def _set_item(self, origin: Any, target: MutableSequence, key: str, value: Any) -> None:
        index = _parse_index(key)
        if index is None:
            raise AssignmentError(
                f"[{self.name}] assignment {_type_name(origin)} path value "
                f"{_type_name(target)} is a list but key [{key}] can not convert to int"
            )
        if not 0 <= index < len(target):
            raise AssignmentError(
                f"[{self.name}] assignment {_type_name(origin)} path value "
                f"{_type_name(target)} length is {len(target)} but set index is {key}"
            )
        target[index] = value


register(SetAssignment())