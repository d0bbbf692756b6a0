"""Filters: prioritised, weighted rules that change data when their conditions hold."""

from __future__ import annotations

import json
import random
from collections.abc import Callable, Mapping, MutableSequence, Sequence
from dataclasses import dataclass
from itertools import groupby
from typing import Any

from .cache import Cache
from .condition import Condition, Logic, Operation, Variable, build_condition
from .errors import BuildError
from .executor import Executor, build_executor

Reporter = Callable[[Any, Any, list], None]


@dataclass(eq=False)
class SingleFilter:
    """One rule: when ``condition`` holds, ``executor`` is applied."""

    id: str
    weight: int
    priority: int
    condition: Condition
    executor: Executor

    def run(self, ctx: Any, data: Any, cache: Cache | None) -> bool:
        """Apply the executor if the condition holds; return whether it did."""
        if not self.condition.is_ok(ctx, data, cache):
            return False
        self.executor.execute(ctx, data)
        return True


@dataclass(frozen=True)
class _Segment:
    start: int
    end: int
    weight: int


class BatchFilter:
    """Filters ordered by ascending priority.

    Within one priority the order is shuffled by weight on every run. Unless
    ``batch`` is set, the run stops at the first filter that applies.
    """

    def __init__(self, batch: bool = False) -> None:
        self.batch = batch
        self.filters: list[SingleFilter] = []
        self.weight = 0
        self._segments: list[_Segment] = []

    def add(self, single: SingleFilter) -> None:
        """Insert ``single``, keeping the filters ordered by priority."""
        self.filters.append(single)
        self.weight += single.weight
        self.filters.sort(key=lambda item: item.priority)
        self._locate_segments()

    def _locate_segments(self) -> None:
        segments = []
        start = 0
        for _, members in groupby(self.filters, key=lambda item: item.priority):
            members = list(members)
            end = start + len(members)
            segments.append(_Segment(start, end, filter_weight(members)))
            start = end
        self._segments = segments

    def run(self, ctx: Any, data: Any, cache: Cache | None) -> list[str]:
        """Run the filters against ``data``; return the ids of those that applied."""
        if self.weight > 0:
            for segment in self._segments:
                if segment.weight == 0:
                    continue
                members = self.filters[segment.start:segment.end]
                shuffle_by_weight(members, segment.weight)
                self.filters[segment.start:segment.end] = members

        applied: list[str] = []
        for single in self.filters:
            if not single.run(ctx, data, cache):
                continue
            applied.append(single.id)
            if not self.batch:
                break
        return applied


def _field(entry: Mapping, name: str, default: Any) -> Any:
    """Look a field up by exact name first, then case-insensitively."""
    if name in entry:
        return entry[name]
    lowered = name.lower()
    for key, value in entry.items():
        if isinstance(key, str) and key.lower() == lowered:
            return value
    return default


def _integer(value: Any, label: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise BuildError(f"filter {label} must be an integer, got {value!r}")
    return value


def build_single_filter(
    ctx: Any,
    filter_id: str,
    weight: int,
    priority: int,
    filter_data: Sequence[Any] | None,
    variables: Mapping[str, Variable] | None = None,
    operations: Mapping[str, Operation] | None = None,
) -> SingleFilter:
    """Build a filter from conditions followed by one executor."""
    items = list(filter_data or [])
    if len(items) < 2:
        raise BuildError("filter must contain at least two items")
    condition = build_condition(ctx, items[:-1], Logic.AND, variables, operations)
    executor = build_executor(ctx, items[-1:])
    return SingleFilter(filter_id, weight, priority, condition, executor)


def build_batch_filter(
    ctx: Any,
    config: Mapping[str, Any],
    variables: Mapping[str, Variable] | None = None,
    operations: Mapping[str, Operation] | None = None,
) -> BatchFilter:
    """Build a batch from ``{"filters": [...], "batch": bool}``."""
    if not isinstance(config, Mapping):
        raise BuildError("filter config must be an object")

    batch_flag = _field(config, "batch", False)
    if batch_flag is None:
        batch_flag = False
    if not isinstance(batch_flag, bool):
        raise BuildError(f"filter batch must be a boolean, got {batch_flag!r}")

    entries = _field(config, "filters", None) or []
    if not isinstance(entries, (list, tuple)):
        raise BuildError("filter config filters must be an array")

    batch = BatchFilter(batch_flag)
    for entry in entries:
        if not isinstance(entry, Mapping):
            raise BuildError("filter config entry must be an object")
        filter_id = _field(entry, "id", "")
        if filter_id is None:
            filter_id = ""
        if not isinstance(filter_id, str):
            raise BuildError(f"filter id must be a string, got {filter_id!r}")
        filter_data = _field(entry, "filter", None)
        if filter_data is not None and not isinstance(filter_data, (list, tuple)):
            raise BuildError("filter definition must be an array")
        batch.add(
            build_single_filter(
                ctx,
                filter_id,
                _integer(_field(entry, "weight", 0), "weight"),
                _integer(_field(entry, "priority", 0), "priority"),
                filter_data,
                variables,
                operations,
            )
        )
    return batch


def _parse_config(json_str: str) -> Any:
    try:
        return json.loads(json_str)
    except ValueError as err:
        raise BuildError(f"invalid filter config: {err}") from err


class Filter:
    """A set of filters built from JSON, replaceable at run time."""

    def __init__(
        self,
        ctx: Any,
        json_str: str,
        reporter: Reporter | None = None,
        variables: Mapping[str, Variable] | None = None,
        operations: Mapping[str, Operation] | None = None,
    ) -> None:
        self._variables = dict(variables or {})
        self._operations = dict(operations or {})
        self._reporter = reporter
        self._batch = build_batch_filter(
            ctx, _parse_config(json_str), self._variables, self._operations
        )

    def execute(self, ctx: Any, data: Any = None) -> Any:
        """Run the filters on ``data`` (a new dict when None) and return it."""
        if data is None:
            data = {}
        batch = self._batch
        applied = batch.run(ctx, data, Cache())
        if self._reporter is not None:
            self._reporter(ctx, data, applied)
        return data

    def refresh(self, ctx: Any, json_str: str) -> None:
        """Replace the filters; on error the current ones are kept."""
        self._batch = build_batch_filter(
            ctx, _parse_config(json_str), self._variables, self._operations
        )


def filter_weight(filters: Sequence[SingleFilter]) -> int:
    """Return the sum of the filters' weights."""
    return sum(item.weight for item in filters)


def pick_by_weight(filters: Sequence[SingleFilter], total_weight: int) -> int:
    """Pick an index at random, each filter weighted by its weight."""
    if total_weight <= 0:
        raise ValueError("total weight must be positive")
    choose = random.randrange(total_weight) + 1
    line = 0
    for index, item in enumerate(filters):
        line += item.weight
        if choose <= line:
            return index
    return 0


def shuffle_by_weight(filters: MutableSequence[SingleFilter], total_weight: int) -> None:
    """Reorder ``filters`` in place so heavier filters tend to come first."""
    if len(filters) < 2:
        return
    for current in range(len(filters)):
        if total_weight <= 0:
            break
        chosen = current + pick_by_weight(filters[current:], total_weight)
        total_weight -= filters[chosen].weight
        if chosen != current:
            filters[chosen], filters[current] = filters[current], filters[chosen]