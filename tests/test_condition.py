import operator
import time

import pytest

from rulefilter.cache import Cache
from rulefilter.condition import (
    BaseCondition,
    ConditionGroup,
    Logic,
    Operation,
    Variable,
    build_condition,
    build_group,
)
from rulefilter.errors import BuildError
from rulefilter.requestcontext import Context


class _Constant(Variable):
    def __init__(self, name, value):
        self.name = name
        self._value = value

    def value(self, ctx, data, cache):
        return self._value


class _Now(Variable):
    def __init__(self, name):
        self.name = name

    def value(self, ctx, data, cache):
        return int(time.time())


class _Compare(Operation):
    def __init__(self, name, op):
        self.name = name
        self._op = op

    def run(self, ctx, variable, value, data, cache):
        return self._op(variable.value(ctx, data, cache), value)


class _RejectingOperation(Operation):
    name = "reject"

    def prepare_value(self, value):
        raise ValueError("bad value")

    def run(self, ctx, variable, value, data, cache):
        return True


class _Fixed(BaseCondition):
    pass


VARIABLES = {
    "success": _Constant("success", 1),
    "time": _Now("time"),
    "timestamp": _Now("timestamp"),
}
OPERATIONS = {
    "=": _Compare("=", operator.eq),
    ">": _Compare(">", operator.gt),
    "<": _Compare("<", operator.lt),
    "reject": _RejectingOperation(),
}


def _run(condition):
    return condition.is_ok(Context(), None, Cache())


@pytest.mark.parametrize(
    "items, message",
    [
        ([], "condition is empty"),
        (["success", "="], "condition item must contains three element"),
        ([1, "=", 1], "condition item 1st element[1] is not string"),
        (["and", "=", "1"], "group condition [and] 3rd element is not array"),
        (["or", "=", "1"], "group condition [or] 3rd element is not array"),
        (["not", "=", "1"], "group condition [not] 3rd element is not array"),
        (["unknown", "=", "1"], "condition not exists variable [unknown]"),
        (["time", 1, "1"], "condition operation should be string [1]"),
        (["time", "match", "1"], "condition not exists operation [match]"),
    ],
)
def test_build_condition_errors(items, message):
    with pytest.raises(BuildError) as excinfo:
        build_condition(Context(), items, Logic.AND, VARIABLES, OPERATIONS)
    assert str(excinfo.value) == message


AND_TRUE = ["and", "=>", [["success", "=", 1], ["timestamp", ">", 1]]]
NOT_FALSE = ["not", "=>", [["success", "=", 1], ["timestamp", "<", 1]]]


@pytest.mark.parametrize(
    "items, logic, expected",
    [
        (["success", "=", 1], Logic.AND, True),
        (["success", ">", 1], Logic.AND, False),
        (["timestamp", ">", 1], Logic.AND, True),
        (["timestamp", "<", 1], Logic.AND, False),
        (AND_TRUE, Logic.AND, True),
        (["and", "=>", [["success", "=", 1], ["timestamp", "<", 1]]], Logic.AND, False),
        (["and", "=>", [["success", ">", 1], ["timestamp", "<", 1]]], Logic.AND, False),
        (["or", "=>", [["success", "=", 1], ["timestamp", ">", 1]]], Logic.OR, True),
        (["or", "=>", [["success", "=", 1], ["timestamp", "<", 1]]], Logic.OR, True),
        (["or", "=>", [["success", ">", 1], ["timestamp", "<", 1]]], Logic.OR, False),
        (["not", "=>", [["success", "=", 1], ["timestamp", ">", 1]]], Logic.NOT, False),
        (NOT_FALSE, Logic.NOT, False),
        (["not", "=>", [["success", ">", 1], ["timestamp", "<", 1]]], Logic.NOT, True),
        (["or", "=>", [AND_TRUE, NOT_FALSE]], Logic.OR, True),
        (["and", "=>", [AND_TRUE, NOT_FALSE]], Logic.AND, False),
        (["not", "=>", [AND_TRUE, NOT_FALSE]], Logic.AND, False),
        (
            [
                "not",
                "=>",
                [
                    ["and", "=>", [["success", "<", 1], ["timestamp", "<", 1]]],
                    NOT_FALSE,
                ],
            ],
            Logic.NOT,
            True,
        ),
    ],
)
def test_build_condition_results(items, logic, expected):
    condition = build_condition(Context(), items, logic, VARIABLES, OPERATIONS)
    assert _run(condition) is expected


def test_group_keyword_is_case_insensitive():
    condition = build_condition(
        Context(), ["OR", "=>", [["success", ">", 1], ["success", "=", 1]]],
        Logic.AND, VARIABLES, OPERATIONS,
    )
    assert isinstance(condition, ConditionGroup)
    assert condition.logic is Logic.OR
    assert _run(condition) is True


def test_prepare_value_error_propagates():
    with pytest.raises(ValueError, match="bad value"):
        build_condition(Context(), ["success", "reject", 1], Logic.AND, VARIABLES, OPERATIONS)


def test_base_condition_holds_prepared_parts():
    condition = build_condition(Context(), ["success", "=", 1], Logic.AND, VARIABLES, OPERATIONS)
    assert isinstance(condition, BaseCondition)
    assert condition.variable is VARIABLES["success"]
    assert condition.operation is OPERATIONS["="]
    assert condition.value == 1


def test_build_group_error():
    with pytest.raises(BuildError) as excinfo:
        build_group(Context(), ["1", "2"], Logic.AND, VARIABLES, OPERATIONS)
    assert str(excinfo.value) == "condition item is not array"


@pytest.mark.parametrize(
    "items, logic, expected",
    [
        ([["success", "=", 1], ["timestamp", ">", 1]], Logic.AND, True),
        ([["success", "=", 1], ["timestamp", "<", 1]], Logic.AND, False),
        ([["success", ">", 1], ["timestamp", "<", 1]], Logic.AND, False),
        ([["success", "=", 1], ["timestamp", ">", 1]], Logic.OR, True),
        ([["success", "=", 1], ["timestamp", "<", 1]], Logic.OR, True),
        ([["success", ">", 1], ["timestamp", "<", 1]], Logic.OR, False),
        ([["success", "=", 1], ["timestamp", ">", 1]], Logic.NOT, False),
        ([["success", "=", 1], ["timestamp", "<", 1]], Logic.NOT, False),
        ([["success", ">", 1], ["timestamp", "<", 1]], Logic.NOT, True),
    ],
)
def test_build_group_results(items, logic, expected):
    group = build_group(Context(), items, logic, VARIABLES, OPERATIONS)
    assert len(group.conditions) == 2
    assert _run(group) is expected


@pytest.mark.parametrize("logic", list(Logic))
def test_empty_group_is_satisfied(logic):
    assert _run(ConditionGroup(logic)) is True


def test_group_add_appends_in_order():
    group = ConditionGroup(Logic.OR)
    first = _Fixed(VARIABLES["success"], OPERATIONS[">"], 1)
    second = _Fixed(VARIABLES["success"], OPERATIONS["="], 1)
    group.add(first)
    group.add(second)
    assert group.conditions == [first, second]
    assert _run(group) is True