# autopipe

autopipe provides the building blocks of automation pipelines that are
described as JSON-style node configurations. A node names a recognition type
and an action. It also lists the nodes that follow it (`next`, `interrupt`,
`on_error`) and can hold a condition, branches that run on that condition,
and log templates that go through a variable store.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

### `autopipe.common`

- `RecognitionType` and `ActionType` are enums. Each value is the name used in
  configurations, such as `"DirectHit"`, `"findcolor"`, `"OCR"`, `"Click"` or
  `"StopTask"`.
- `recognition_type_from_string` and `recognition_type_to_string` convert
  recognition types to and from their names. An unknown name gives
  `RecognitionType.DIRECT_HIT`.
- `action_type_from_string` and `action_type_to_string` do the same for
  actions. An unknown name gives `ActionType.DO_NOTHING`.
- `Point(x, y)`, `Rect(x1, y1, x2, y2)` and `Box(x, y, width, height)` are
  frozen dataclasses. `Box.center()` returns the middle of the box as a
  `Point`, using integer halves.
- `RecognitionResult` holds `success`, `box`, `score` and `text`.
- `VariableStore` is a protocol that you implement. It defines four methods:
  - `process_string(text)` expands variables and runs operations in a
    template.
  - `get_variable(name)` returns the value of a variable.
  - `set_variable(name, value)` assigns a value to a variable.
  - `evaluate_condition(expression)` evaluates a condition.

### `autopipe.action` and `autopipe.input_actions`

Each action has `parse_config(config)` and `execute(result)`. The `execute`
method returns whether the action succeeded. Actions print what they would
do. They never drive a device and never start a program.

`autopipe.action` contains these actions:

- `DoNothingAction` always succeeds.
- `StartAppAction` and `StopAppAction` read `package`. They fail when the
  package is empty.
- `CommandAction` reads `exec`, `args` and `detach`. It prints the command
  line and fails when `exec` is empty.
- `StopTaskAction(variables, on_stop)` calls `on_stop` with a reason string.

`autopipe.input_actions` contains these actions:

- `ClickAction` reads `target` and `target_offset`. A target can take one of
  these forms:
  - `true`, which means the centre of the recognised box.
  - A list `[x, y]`.
  - A region `[x, y, w, h]`, where a random point inside the region is chosen.
  - A string. A string without variable markers means the recognised box. A
    string with markers is expanded through the store and then read as
    `x,y`, or as a `%p` point variable.

  The position of the last click is kept in `last_position`.
- `SwipeAction` reads `begin`, `end`, `begin_offset`, `end_offset` and
  `duration`. The default duration is 200 ms. The end can also name a `%r`
  rect variable, in which case its bottom-right corner is used. After a
  swipe, the action keeps `last_path`. When a store is attached, it also sets
  `%pLastSwipeBegin`, `%pLastSwipeEnd` and `%rLastSwipeArea`.
- `KeyAction` reads `key`, which can be a single code or a list of codes.
- `TextAction` reads `input_text` and expands variables in it.

Offsets are given as `[dx, dy]` or as `[dx, dy, rw, rh]`. In the second form,
a random extra amount below `rw` and below `rh` is added.

A value of the wrong type in a config raises `TypeError`.

### `autopipe.factory`

`create_action(kind, config, variables)` builds the action for an
`ActionType` or its name. It applies `config` when the config is not empty.

### `autopipe.node`

`Node(name, variables)` is set up with `initialize(config)`.

`recognition` and `action` can each be given in two forms:

- A bare name. In this form the action's settings are read from the node
  itself.
- An object with a `"type"` key and the settings beside it.

The node also reads these keys:

- `next`, `interrupt`, `on_error` and `var`. Each can be a string or a list.
- `condition` and `condition_process`.
- `log`, `enabled`, `inverse`, `timeout`, `pre_delay`, `post_delay` and
  `focus`.

The node provides these methods:

- `execute_action(result)` runs the action and then sleeps for `post_delay`
  milliseconds. It returns `False` if the node is disabled.
- `check_condition(variables)` returns `True` when the node has no condition.
- `process_condition(variables, condition_result)` applies the chosen
  branch's `override_next` and `override_interrupt`, runs its
  `var_operation`, and prints its `condition_log`.
- `process_log(variables, success)` prints the `"true"` or `"false"` log line
  and returns it. `process_condition_log` does the same for condition logs.

## Example

```python
from autopipe.common import Box, RecognitionResult
from autopipe.node import Node


class DictStore:
    def __init__(self):
        self.values = {}

    def process_string(self, text):
        for name, value in self.values.items():
            text = text.replace(f"[{name}]", str(value))
        return text

    def get_variable(self, name):
        return self.values.get(name)

    def set_variable(self, name, value):
        self.values[name] = value

    def evaluate_condition(self, expression):
        name, limit = expression.split("<")
        return self.values.get(name, 0) < int(limit)


store = DictStore()
store.set_variable("%inum", 1)
node = Node("Battle", store)
node.initialize({
    "recognition": "DirectHit",
    "action": {"type": "Click", "target": [100, 200]},
    "condition": "%inum<3",
    "log": {"true": "battle [%inum] done"},
})

result = RecognitionResult(success=True, box=Box(0, 0, 10, 10))
ok = node.execute_action(result)        # prints "Clicking at: 100, 200"
node.process_log(store, ok)             # prints "[Battle] battle 1 done"
```

## What this package does not do

The package has no pipeline runner. Nothing in it loads a whole pipeline
from a file or a string, walks from node to node, or suspends, resumes or
stops a run. A node records its recognition type and settings but performs
no recognition: there is no template matching, colour search or OCR. There
is also no ready-made variable store. You provide an object that meets the
`VariableStore` protocol.