# rulefilter

`rulefilter` applies rule-driven filters to your data. Each filter is a list
of conditions followed by an action. When every condition holds, the action
runs. An action assigns values into the data or deletes keys from it.

A JSON document sets up the filters. Filters are sorted by ascending
priority. On every run, the filters that share a priority are shuffled by
weight, so heavier filters tend to come first. In normal mode the first
filter that applies wins. In batch mode (`"batch": true`) every filter whose
conditions hold is applied, in order.

## Installation

```
pip install rulefilter
```

## Configuration

```json
{
  "filters": [
    {
      "id": "1",
      "weight": 1,
      "priority": 1,
      "filter": [
        ["success", "=", 1],
        ["timestamp", ">", 1],
        [
          ["name", "=", "Alice"],
          ["age", "=", 10]
        ]
      ]
    }
  ],
  "batch": false
}
```

- A filter needs at least two items. Every item except the last is a
  condition, and all of them must hold.
- A condition has the form `[variable, operation, value]`. The variable and
  the operation are looked up by name in the mappings you pass in (see
  below).
- A condition can also be a logic group,
  `["and" | "or" | "not", <anything>, [cond, cond, ...]]`. The middle
  element is ignored, and the logic word is matched without regard to case.
  Groups may be nested.
  - `and` holds when every member holds.
  - `or` holds when at least one member holds.
  - `not` holds when no member holds.
  - An empty group holds.
- The last item is the action. It is either a single
  `[key, assignment, value]` or a list of them, run in order.
  - The `"="` assignment sets a value.
  - The `"del"` assignment removes a key from a mapping. A missing key is
    ignored.
  - A key may be a dotted path such as `user.profile.name` or `items.0`.
    The path reaches into mappings, lists (by index) and object attributes.
    For a dataclass, a field can also be addressed by a `"json"` entry in
    its field metadata.
- Field names in the document (`filters`, `batch`, `id`, `weight`,
  `priority`, `filter`) are matched exactly first, then without regard to
  case. `weight` and `priority` must be integers, and `id` a string.

## Usage

The package ships no variables and no comparison operations. You supply them
as mappings from name to a `Variable` or `Operation` subclass instance:

```python
from rulefilter.condition import Operation, Variable
from rulefilter.filter import Filter
from rulefilter.requestcontext import Context, from_user_id, with_user_id


class UserId(Variable):
    name = "uid"

    def value(self, ctx, data, cache):
        return from_user_id(ctx)


class Equal(Operation):
    name = "="

    def run(self, ctx, variable, value, data, cache):
        return variable.value(ctx, data, cache) == value


def report(ctx, data, filter_ids):
    print("applied:", filter_ids)


config_json = """
{"filters": [{"id": "1", "weight": 1, "priority": 1,
              "filter": [["uid", "=", "user-1"], ["name", "=", "Alice"]]}],
 "batch": false}
"""

ctx = with_user_id(Context(), "user-1")
flt = Filter(ctx, config_json, report,
             variables={"uid": UserId()}, operations={"=": Equal()})

result = flt.execute(ctx)      # None starts from an empty dict
print(result)                  # {'name': 'Alice'}
flt.refresh(ctx, config_json)  # replace the rules; on error the old ones stay
```

- `Filter(ctx, json_str, reporter=None, variables=None, operations=None)`
  parses and builds the filters, and raises `BuildError` for invalid JSON or
  an invalid definition.
- `Filter.execute(ctx, data=None)` runs the filters on `data`, changing it in
  place, and returns it. If a reporter is set, it is called as
  `reporter(ctx, data, filter_ids)` with the ids of the filters that
  applied.
- `Filter.refresh(ctx, json_str)` rebuilds the filters with the same
  variables and operations.
- `Operation.prepare_value(value)` may be overridden to convert the
  configured value once, when the filter is built.

### Lower-level building blocks

- `rulefilter.filter`
  - `build_single_filter`, `build_batch_filter`
  - `SingleFilter`, `BatchFilter`
  - `filter_weight`, `pick_by_weight` and `shuffle_by_weight` for weighted
    ordering. `pick_by_weight` raises `ValueError` if the total weight is
    not positive.
- `rulefilter.condition`
  - `build_condition`, `build_group`
  - `Logic`, `Variable`, `Operation`, `Condition`, `BaseCondition`,
    `ConditionGroup`
- `rulefilter.executor`
  - `build_executor`, `build_group`
  - `Executor`, `BaseExecutor`, `ExecutorGroup`
- `rulefilter.assignment`
  - The `Assignment` base class, and an `AssignmentRegistry`.
  - The module-level `register` and `get`, which use the default registry.
    Registering an empty or duplicate name raises `ValueError`.
  - `resolve_path`, which walks a dotted path and raises `LookupError` for a
    step that does not exist.
- `rulefilter.assign_set.SetAssignment` (`"="`) and
  `rulefilter.assign_delete.DeleteAssignment` (`"del"`), the built-in
  assignments. They are registered when `rulefilter.executor` is imported.
- `rulefilter.cache.Cache`, a thread-safe per-run cache handed to variables
  and operations. It offers `set(key, value)` and `get(key, default=None)`.
- `rulefilter.requestcontext`
  - An immutable `Context` with `with_value(key, value)` and `value(key)`.
  - The pairs `with_user_id`/`from_user_id`, `with_device`/`from_device`,
    `with_ip`/`from_ip`, `with_version`/`from_version`,
    `with_platform`/`from_platform`, `with_channel`/`from_channel`,
    `with_ua`/`from_ua`, `with_referer`/`from_referer` and
    `with_user_tag`/`from_user_tag`.
  - Each `from_*` returns `None` when the value is absent.

### Custom data types

An object can take over assignment itself by providing a `set(key, value)`
or `delete(key, value)` method. These are called in place of the generic
path handling.

### Errors

- `BuildError` is raised for an invalid configuration.
- `AssignmentError` is raised when an action cannot be applied. Examples are
  a missing path, a list index out of range, an unknown attribute, or
  deleting from something that is not a mapping.
- Both derive from `FilterError`.

## What the package does not do

- It has no built-in variables such as request time, IP address, platform or
  version. Every variable a condition names must be passed in.
- It has no built-in comparison operations. Every operation must also be
  passed in.
- It has no IP-to-location lookup.
- It has no command-line tool.

## Running the tests

```
pip install -e .[test]
pytest
```