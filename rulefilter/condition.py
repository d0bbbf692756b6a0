"""Conditions: comparisons of variables against values, combined by logic groups."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Iterable

from .cache import Cache
from .errors import BuildError


class Logic(enum.Enum):
    """How the members of a condition group are combined."""

    AND = "and"
    OR = "or"
    NOT = "not"


class Variable(ABC):
    """A named value taken from the context or the data being filtered."""

    name: str = ""

    @abstractmethod
    def value(self, ctx: Any, data: Any, cache: Cache | None) -> Any:
        """Return the current value of the variable."""


class Operation(ABC):
    """A named comparison between a variable and a configured value."""

    name: str = ""

    def prepare_value(self, value: Any) -> Any:
        """Return the configured value in the form ``run`` expects."""
        return value

    @abstractmethod
    def run(
        self, ctx: Any, variable: Variable, value: Any, data: Any, cache: Cache | None
    ) -> bool:
        """Compare ``variable`` against ``value``."""


class Condition(ABC):
    """Something that is either satisfied or not for given data."""

    @abstractmethod
    def is_ok(self, ctx: Any, data: Any, cache: Cache | None) -> bool:
        """Return whether the condition holds."""


@dataclass
class BaseCondition(Condition):
    """A single ``[variable, operation, value]`` test."""

    variable: Variable
    operation: Operation
    value: Any

    def is_ok(self, ctx: Any, data: Any, cache: Cache | None) -> bool:
        return self.operation.run(ctx, self.variable, self.value, data, cache)


class ConditionGroup(Condition):
    """Conditions combined with AND, OR or NOT (none may hold).

    An empty group is satisfied.
    """

    def __init__(self, logic: Logic = Logic.AND, conditions: Iterable[Condition] = ()) -> None:
        self.logic = logic
        self.conditions: list[Condition] = list(conditions)

    def add(self, condition: Condition) -> None:
        """Append ``condition`` to the group."""
        self.conditions.append(condition)

    def is_ok(self, ctx: Any, data: Any, cache: Cache | None) -> bool:
        result = True
        for condition in self.conditions:
            ok = condition.is_ok(ctx, data, cache)
            if self.logic is Logic.AND:
                if not ok:
                    return False
            elif self.logic is Logic.OR:
                if ok:
                    return True
                result = False
            elif ok:
                return False
        return result


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _group_logic(key: str) -> Logic | None:
    try:
        return Logic(key.lower())
    except ValueError:
        return None


def build_condition(
    ctx: Any,
    items: Any,
    logic: Logic = Logic.AND,
    variables: Mapping[str, Variable] | None = None,
    operations: Mapping[str, Operation] | None = None,
) -> Condition:
    """Build a condition from its list form.

    ``items`` is either a list of sub-conditions combined with ``logic``,
    ``["and"|"or"|"not", <ignored>, [sub-conditions]]``, or
    ``[variable, operation, value]``.
    """
    variables = variables or {}
    operations = operations or {}

    if not items:
        raise BuildError("condition is empty")

    if _is_array(items[0]):
        return build_group(ctx, items, logic, variables, operations)

    if len(items) != 3:
        raise BuildError("condition item must contains three element")

    key, operation_name, raw_value = items
    if not isinstance(key, str):
        raise BuildError(f"condition item 1st element[{key}] is not string")

    group_logic = _group_logic(key)
    if group_logic is not None:
        if not _is_array(raw_value):
            raise BuildError(f"group condition [{key}] 3rd element is not array")
        return build_condition(ctx, raw_value, group_logic, variables, operations)

    variable = variables.get(key)
    if variable is None:
        raise BuildError(f"condition not exists variable [{key}]")

    if not isinstance(operation_name, str):
        raise BuildError(f"condition operation should be string [{operation_name}]")

    operation = operations.get(operation_name)
    if operation is None:
        raise BuildError(f"condition not exists operation [{operation_name}]")

    return BaseCondition(variable, operation, operation.prepare_value(raw_value))


def build_group(
    ctx: Any,
    items: Any,
    logic: Logic = Logic.AND,
    variables: Mapping[str, Variable] | None = None,
    operations: Mapping[str, Operation] | None = None,
) -> ConditionGroup:
    """Build a group whose members are each a condition in list form."""
    group = ConditionGroup(logic)
    for item in items:
        if not _is_array(item):
            raise BuildError("condition item is not array")
        group.add(build_condition(ctx, item, Logic.AND, variables, operations))
    return group