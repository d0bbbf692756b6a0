from dataclasses import dataclass, field

import pytest

from rulefilter import assignment as assignment_module
from rulefilter.assignment import Assignment, AssignmentRegistry, resolve_path


class MockAssignment(Assignment):
    def __init__(self, name=""):
        self.name = name

    def run(self, ctx, data, key, value):
        return None


@dataclass
class Work:
    work_name: str = ""


@dataclass
class User:
    name: str = ""
    works: list = field(default_factory=list)
    id_card: str = field(default="", metadata={"json": "idCard"})


def test_register_none_raises():
    registry = AssignmentRegistry()
    with pytest.raises(TypeError, match="cannot register a None assignment"):
        registry.register(None)


def test_register_empty_name_raises():
    registry = AssignmentRegistry()
    with pytest.raises(ValueError, match="empty name"):
        registry.register(MockAssignment())


def test_register_and_get():
    registry = AssignmentRegistry()
    op = MockAssignment("gt")
    registry.register(op)
    assert registry.get("gt") is op
    assert registry.get("lt") is None


def test_register_duplicate_raises():
    registry = AssignmentRegistry()
    registry.register(MockAssignment("gt"))
    with pytest.raises(ValueError, match="gt assignment already exists"):
        registry.register(MockAssignment("gt"))


def test_names_sorted():
    registry = AssignmentRegistry()
    for name in ["b", "a", "c"]:
        registry.register(MockAssignment(name))
    assert registry.names() == ["a", "b", "c"]


def test_module_level_register_and_get():
    op = MockAssignment("module-level-mock")
    assignment_module.register(op)
    assert assignment_module.get("module-level-mock") is op
    assert assignment_module.get("module-level-missing") is None


def test_prepare_value_returns_value_unchanged():
    value = [1, 2]
    assert Assignment.prepare_value(MockAssignment("x"), None, value) is value


def test_resolve_empty_path_returns_data():
    data = {"a": 1}
    assert resolve_path(data, "") is data


def test_resolve_nested_mapping_sequence_and_object():
    user = User(name="zhangsan", works=[Work(work_name="operation")])
    data = {"user": user, "citys": ["1", "2"]}
    assert resolve_path(data, "user") is user
    assert resolve_path(data, "user.name") == "zhangsan"
    assert resolve_path(data, "user.works.0.work_name") == "operation"
    assert resolve_path(data, "citys.1") == "2"


def test_resolve_json_alias():
    user = User(id_card="110")
    assert resolve_path(user, "idCard") == "110"


@pytest.mark.parametrize("path", ["missing", "citys.5", "citys.x", "user.age", "none.name"])
def test_resolve_missing_raises(path):
    data = {"citys": ["1"], "user": User(), "none": None}
    with pytest.raises(LookupError):
        resolve_path(data, path)


def test_resolve_none_value_returned():
    assert resolve_path({"none": None}, "none") is None