import time

import pytest

from autopipe.action import DoNothingAction
from autopipe.common import ActionType, RecognitionResult, RecognitionType
from autopipe.input_actions import ClickAction, SwipeAction
from autopipe.node import Node


class FakeVariables:
    def __init__(self, condition_value=True):
        self.condition_value = condition_value
        self.processed = []
        self.conditions = []
        self.values = {}

    def process_string(self, text):
        self.processed.append(text)
        return text.upper()

    def get_variable(self, name):
        return self.values.get(name)

    def set_variable(self, name, value):
        self.values[name] = value

    def evaluate_condition(self, expression):
        self.conditions.append(expression)
        return self.condition_value


def make_node(config, name="TestNode", variables=None):
    node = Node(name, variables)
    node.initialize(config)
    return node


def test_string_recognition_and_action_use_whole_config():
    config = {"recognition": "OCR", "action": "Click", "target": [100, 200]}
    node = make_node(config)
    assert node.recognition_type is RecognitionType.OCR
    assert node.recognition_config == config
    assert node.action_type is ActionType.CLICK
    assert isinstance(node.action, ClickAction)
    assert node.action.target == (100, 200)


def test_object_recognition_and_action():
    config = {
        "recognition": {"type": "TemplateMatch", "method": 5},
        "action": {"type": "Swipe", "begin": [100, 200], "end": [300, 400], "duration": 500},
    }
    node = make_node(config)
    assert node.recognition_type is RecognitionType.TEMPLATE_MATCH
    assert node.recognition_config == {"type": "TemplateMatch", "method": 5}
    assert isinstance(node.action, SwipeAction)
    assert node.action.duration == 500
    assert node.action.begin == (100, 200)


def test_action_object_without_type_does_nothing():
    node = make_node({"action": {"target": [1, 2]}})
    assert isinstance(node.action, DoNothingAction)
    assert node.action_type is ActionType.DO_NOTHING


def test_unknown_names_fall_back_to_defaults():
    node = make_node({"recognition": "Bogus", "action": "Bogus"})
    assert node.recognition_type is RecognitionType.DIRECT_HIT
    assert isinstance(node.action, DoNothingAction)


def test_link_lists_accept_string_or_list():
    node = make_node(
        {
            "next": ["Apple", "Orange", "Banana"],
            "interrupt": "Interrupt",
            "on_error": ["Error"],
            "var": "%inumOfBattle=0",
        }
    )
    assert node.next_nodes == ["Apple", "Orange", "Banana"]
    assert node.interrupt_nodes == ["Interrupt"]
    assert node.on_error_nodes == ["Error"]
    assert node.variable_definitions == ["%inumOfBattle=0"]


def test_link_list_with_non_string_raises():
    with pytest.raises(TypeError):
        make_node({"next": ["Apple", 3]})


def test_execute_action_do_nothing_succeeds():
    node = make_node({"recognition": "DirectHit", "action": "DoNothing"})
    assert node.execute_action(RecognitionResult(success=True)) is True


def test_disabled_node_action_fails():
    enabled = make_node({"action": "DoNothing", "enabled": True})
    disabled = make_node({"action": "DoNothing", "enabled": False})
    assert enabled.enabled is True
    assert disabled.enabled is False
    assert disabled.execute_action(RecognitionResult(success=True)) is False


def test_delays_parsed_and_post_delay_waited():
    node = make_node({"action": "DoNothing", "pre_delay": 100, "post_delay": 100})
    assert node.pre_delay == 100
    assert node.post_delay == 100
    start = time.monotonic()
    assert node.execute_action(RecognitionResult(success=True)) is True
    assert time.monotonic() - start >= 0.1


def test_flags_and_timeout():
    node = make_node({"inverse": True, "focus": True, "timeout": 500})
    assert node.inverse is True
    assert node.focus is True
    assert node.timeout == 500


def test_bad_flag_type_raises():
    with pytest.raises(TypeError):
        make_node({"enabled": "yes"})


def test_check_condition_without_condition_skips_store():
    variables = FakeVariables(condition_value=False)
    node = make_node({})
    assert node.check_condition(variables) is True
    assert variables.conditions == []


def test_check_condition_delegates_to_store():
    variables = FakeVariables(condition_value=False)
    node = make_node({"condition": "%inumOfBattle<3"})
    assert node.check_condition(variables) is False
    assert variables.conditions == ["%inumOfBattle<3"]


CONDITION_CONFIG = {
    "condition": "%inumOfBattle<3",
    "condition_process": {
        "true": {
            "override_next": ["CheckBattleCount"],
            "override_interrupt": ["CheckNum"],
            "var_operation": "{%inumOfBattle++} {%iallnumOfBattle++}",
            "condition_log": "condition_log => [%inumOfBattle]",
        },
        "false": {
            "override_next": ["End"],
            "condition_log": "stop",
        },
    },
    "next": ["OriginalNext"],
    "interrupt": ["OriginalInterrupt"],
}


def test_condition_process_true_branch_parsed_at_init():
    node = make_node(CONDITION_CONFIG, name="Battle")
    assert node.override_next_nodes == ["CheckBattleCount"]
    assert node.override_interrupt_nodes == ["CheckNum"]
    assert node.var_operations == {"true": "{%inumOfBattle++} {%iallnumOfBattle++}"}
    assert set(node.condition_logs) == {"true", "false"}


def test_process_condition_true_runs_operation_and_log(capsys):
    variables = FakeVariables()
    node = make_node(CONDITION_CONFIG, name="Battle")
    node.process_condition(variables, True)
    assert variables.processed == [
        "{%inumOfBattle++} {%iallnumOfBattle++}",
        "condition_log => [%inumOfBattle]",
    ]
    assert node.override_next_nodes == ["CheckBattleCount"]
    out = capsys.readouterr().out
    assert out == "[Battle] Condition true: CONDITION_LOG => [%INUMOFBATTLE]\n"


def test_process_condition_false_switches_overrides(capsys):
    variables = FakeVariables()
    node = make_node(CONDITION_CONFIG, name="Battle")
    node.process_condition(variables, False)
    assert node.override_next_nodes == ["End"]
    assert node.override_interrupt_nodes == []
    assert variables.processed == ["stop"]
    assert capsys.readouterr().out == "[Battle] Condition false: STOP\n"


def test_process_condition_without_config_does_nothing():
    variables = FakeVariables()
    node = make_node({"condition": "%ix<3"})
    node.process_condition(variables, True)
    assert variables.processed == []
    assert node.override_next_nodes == []


def test_process_log_uses_outcome_key(capsys):
    variables = FakeVariables()
    node = make_node({"log": {"true": "ok [%ix]", "false": "bad"}}, name="End")
    assert node.process_log(variables, True) == "[End] OK [%IX]"
    assert node.process_log(variables, False) == "[End] BAD"
    assert capsys.readouterr().out == "[End] OK [%IX]\n[End] BAD\n"


def test_process_log_missing_key_returns_none():
    variables = FakeVariables()
    node = make_node({"log": {"true": "only success"}})
    assert node.process_log(variables, False) is None
    assert variables.processed == []


def test_log_value_must_be_string():
    with pytest.raises(TypeError):
        make_node({"log": {"true": 5}})


def test_swipe_action_gets_node_variables():
    variables = FakeVariables()
    node = make_node(
        {"action": {"type": "Swipe", "begin": [150, 150], "end": [350, 350]}},
        variables=variables,
    )
    assert node.execute_action(RecognitionResult()) is True
    assert variables.values["%pLastSwipeBegin"].x == 150
    assert variables.values["%rLastSwipeArea"].x2 == 350