"""Executors: assignments applied to data once a filter matches."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterable

from . import assign_delete, assign_set  # noqa: F401  registers "del" and "="
from .assignment import Assignment
from .assignment import get as get_assignment
from .errors import BuildError


class Executor(ABC):
    """Something that changes data."""

    @abstractmethod
    def execute(self, ctx: Any, data: Any) -> None:
        """Apply the change to ``data``."""


@dataclass
class BaseExecutor(Executor):
    """A single ``[key, assignment, value]`` action."""

    key: str
    assignment: Assignment
    value: Any

    def execute(self, ctx: Any, data: Any) -> None:
        self.assignment.run(ctx, data, self.key, self.value)


class ExecutorGroup(Executor):
    """Executors run one after another; the first error stops the run."""

    def __init__(self, executors: Iterable[Executor] = ()) -> None:
        self.executors: list[Executor] = list(executors)

    def add(self, executor: Executor) -> None:
        """Append ``executor`` to the group."""
        self.executors.append(executor)

    def execute(self, ctx: Any, data: Any) -> None:
        for executor in self.executors:
            executor.execute(ctx, data)


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def build_executor(ctx: Any, items: Any) -> Executor:
    """Build an executor from ``[key, assignment, value]`` or a list of those."""
    if not items:
        raise BuildError("executor item must be array")

    if _is_array(items[0]):
        return build_group(ctx, items)

    if len(items) != 3:
        raise BuildError("executor item must contains 3 elements")

    key, assignment_name, raw_value = items
    if not isinstance(key, str):
        raise BuildError(f"executor item 1st item  {key} is not string")
    if not isinstance(assignment_name, str):
        raise BuildError(f"executor item 2nd item  {assignment_name} is not string")

    assignment = get_assignment(assignment_name)
    if assignment is None:
        raise BuildError(f"executor assignment not exists [{assignment_name}]")

    try:
        value = assignment.prepare_value(ctx, raw_value)
    except Exception as err:
        raise BuildError(
            f"executor assignment [{assignment_name}] preparevalue err:{err}"
        ) from err

    return BaseExecutor(key, assignment, value)


def build_group(ctx: Any, items: Any) -> ExecutorGroup:
    """Build a group from a list of executors in list form."""
    group = ExecutorGroup()
    for item in items:
        if not _is_array(item):
            raise BuildError("executor group item must be array")
        group.add(build_executor(ctx, item))
    return group