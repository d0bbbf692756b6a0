"""Assignment base class, registry and dotted-path resolution."""

from __future__ import annotations

import dataclasses
import re
import threading
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

_INDEX_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


class Assignment(ABC):
    """An action that writes into data under a dotted key."""

    name: str = ""

    def prepare_value(self, ctx: Any, value: Any) -> Any:
        """Return the value to use at run time; by default it is unchanged."""
        return value

    @abstractmethod
    def run(self, ctx: Any, data: Any, key: str, value: Any) -> None:
        """Apply the assignment to ``data``."""


class AssignmentRegistry:
    """Assignments looked up by their name."""

    def __init__(self) -> None:
        self._assignments: dict[str, Assignment] = {}
        self._lock = threading.Lock()

    def register(self, assignment: Assignment) -> None:
        """Add ``assignment``; its name must be non-empty and not yet taken."""
        if assignment is None:
            raise TypeError("cannot register a None assignment")
        if not assignment.name:
            raise ValueError("cannot register an assignment with an empty name")
        with self._lock:
            if assignment.name in self._assignments:
                raise ValueError(f"{assignment.name} assignment already exists")
            self._assignments[assignment.name] = assignment

    def get(self, name: str) -> Assignment | None:
        """Return the assignment registered as ``name``, or None."""
        with self._lock:
            return self._assignments.get(name)

    def names(self) -> list[str]:
        """Return the registered names in sorted order."""
        with self._lock:
            return sorted(self._assignments)


_default_registry = AssignmentRegistry()


def register(assignment: Assignment) -> None:
    """Register ``assignment`` in the default registry."""
    _default_registry.register(assignment)


def get(name: str) -> Assignment | None:
    """Look ``name`` up in the default registry."""
    return _default_registry.get(name)


def _type_name(obj: Any) -> str:
    return type(obj).__name__


def _parse_index(text: str) -> int | None:
    """Parse a base-10 list index that fits in 32 bits."""
    if not _INDEX_PATTERN.fullmatch(text):
        return None
    index = int(text)
    if not _INT32_MIN <= index <= _INT32_MAX:
        return None
    return index


def _is_record(obj: Any) -> bool:
    if isinstance(obj, type):
        return False
    return dataclasses.is_dataclass(obj) or hasattr(obj, "__dict__")


def _attribute_name(obj: Any, key: str) -> str | None:
    """Find the attribute addressed by ``key``: by name, then by json alias."""
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        fields = dataclasses.fields(obj)
        for field in fields:
            if field.name == key:
                return field.name
        for field in fields:
            if field.metadata.get("json") == key:
                return field.name
        return None
    attributes = getattr(obj, "__dict__", None)
    if isinstance(attributes, Mapping) and key in attributes:
        return key
    return None


def _is_sequence(obj: Any) -> bool:
    return isinstance(obj, Sequence) and not isinstance(obj, (str, bytes, bytearray))


def _child(current: Any, part: str) -> Any:
    if current is None:
        raise LookupError(part)
    if isinstance(current, Mapping):
        if part not in current:
            raise LookupError(part)
        return current[part]
    if _is_sequence(current):
        index = _parse_index(part)
        if index is None or not 0 <= index < len(current):
            raise LookupError(part)
        return current[index]
    name = _attribute_name(current, part)
    if name is None:
        raise LookupError(part)
    return getattr(current, name)


def resolve_path(data: Any, path: str) -> Any:
    """Follow the dotted ``path`` through mappings, sequences and objects.

    An empty path yields ``data`` itself. Raises LookupError when a step
    does not exist.
    """
    if not path:
        return data
    current = data
    for part in path.split("."):
        current = _child(current, part)
    return current