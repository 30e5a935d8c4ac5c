"""
Tests for sequence and direct step expansion.
"""

import pytest

from vectorpose.engine.expander import expand_action, expand_direct, expand_sequence
from vectorpose.models.config import ActionConfig, RouteBlock
from vectorpose.models.errors import UnknownStateError
from vectorpose.models.step import Step

STATES = frozenset({"left", "center", "right"})


def make_routes(raw):
    return {key: RouteBlock.model_validate(block) for key, block in raw.items()}


@pytest.fixture
def routes():
    return make_routes({
        "left": {"*": ["left"], "right": ["center", "left"]},
        "right": {"*": ["right"], "left": ["center", "right"]},
        "center": {"*": ["center"]},
    })


class TestSequenceExpansion:

    def test_wildcard_waypoints_become_steps(self):
        routes = make_routes({"right": {"*": ["center", "right"]}})
        expansion = expand_sequence(["right"], "left", routes, None, 120, STATES)

        assert expansion.states == ("center", "right")
        assert expansion.final_state == "right"

    def test_scenario_single_step_then_source_specific(self, routes):
        first = expand_sequence(["left"], "center", routes, None, 120, STATES)
        assert first.steps == (Step("left", 120),)

        second = expand_sequence(["right"], first.final_state, routes, None, 120, STATES)
        assert second.steps == (Step("center", 120), Step("right", 120))

    def test_routes_resolve_against_running_pointer(self, routes):
        expansion = expand_sequence(["left", "right"], "center", routes, None, 120, STATES)
        assert expansion.states == ("left", "center", "right")

    def test_leading_noop_dropped(self, routes):
        expansion = expand_sequence(["center"], "center", routes, None, 120, STATES)
        assert expansion.steps == ()
        assert expansion.final_state == "center"

    def test_unrouted_entry_targets_itself(self, routes):
        expansion = expand_sequence(["left"], "right", make_routes({}), None, 120, STATES)
        assert expansion.states == ("left",)

    def test_visited_state_route_ms_applies(self):
        # "right" key's own ms is not used for the "center" waypoint
        routes = make_routes({
            "right": {"ms": 300, "*": ["center", "right"]},
            "center": {"ms": 50},
        })
        expansion = expand_sequence(["right"], "left", routes, None, 120, STATES)
        assert expansion.steps == (Step("center", 50), Step("right", 300))

    def test_action_ms_overrides_route_ms(self):
        routes = make_routes({"right": {"ms": 300, "*": ["center", "right"]}})
        expansion = expand_sequence(["right"], "left", routes, 80, 120, STATES)
        assert [step.ms for step in expansion.steps] == [80, 80]

    def test_unknown_state_names_route_key_and_state(self):
        routes = make_routes({"right": {"*": ["bridge", "right"]}})

        with pytest.raises(UnknownStateError) as exc_info:
            expand_sequence(["right"], "left", routes, None, 120, STATES)

        assert exc_info.value.route_key == "right"
        assert exc_info.value.state == "bridge"

    def test_unknown_plain_entry(self, routes):
        with pytest.raises(UnknownStateError):
            expand_sequence(["nowhere"], "center", routes, None, 120, STATES)

    def test_validation_skipped_without_state_set(self, routes):
        expansion = expand_sequence(["nowhere"], "center", routes, None, 120, None)
        assert expansion.states == ("nowhere",)

    def test_deterministic(self, routes):
        args = (["left", "right", "center"], "center", routes, None, 120, STATES)
        assert expand_sequence(*args) == expand_sequence(*args)


class TestDirectExpansion:

    def test_waypoints_collapse_to_destination(self):
        routes = make_routes({"right": {"*": ["center", "right"]}})
        expansion = expand_direct(["right"], "left", routes, None, 120, STATES)

        assert expansion.steps == (Step("right", 120),)
        assert expansion.final_state == "right"

    def test_noop_instruction_emits_nothing(self, routes):
        expansion = expand_direct(["left", "left"], "center", routes, None, 120, STATES)
        assert expansion.states == ("left",)

    def test_noop_checked_before_validation(self):
        # "ghost" resolves back onto the pointer, so the unknown waypoint never matters
        routes = make_routes({"ghost": {"*": ["phantom", "center"]}})
        expansion = expand_direct(["ghost"], "center", routes, None, 120, STATES)
        assert expansion.steps == ()

    def test_unknown_destination(self):
        routes = make_routes({"right": {"*": ["center", "bridge"]}})
        with pytest.raises(UnknownStateError) as exc_info:
            expand_direct(["right"], "left", routes, None, 120, STATES)
        assert exc_info.value.state == "bridge"

    def test_unknown_intermediate_ignored(self):
        routes = make_routes({"right": {"*": ["bridge", "right"]}})
        expansion = expand_direct(["right"], "left", routes, None, 120, STATES)
        assert expansion.states == ("right",)

    def test_destination_route_ms(self):
        routes = make_routes({"right": {"ms": 40, "*": ["center", "right"]}, "center": {"ms": 999}})
        expansion = expand_direct(["right"], "left", routes, None, 120, STATES)
        assert expansion.steps == (Step("right", 40),)

    def test_scenario_iteration(self, routes):
        first = expand_direct(["left", "right"], "center", routes, None, 120, STATES)
        second = expand_direct(["left", "right"], first.final_state, routes, None, 120, STATES)

        assert first.states == ("left", "right")
        assert second.states == ("left", "right")
        assert second.final_state == "right"


class TestExpandAction:

    def test_direct_loop_uses_direct_strategy(self, routes):
        action = ActionConfig.model_validate({"type": "loop", "mode": "direct", "order": ["right"]})
        assert expand_action(action, "left", routes, 120, STATES).states == ("right",)

    def test_normal_loop_uses_sequence_strategy(self, routes):
        action = ActionConfig.model_validate({"type": "loop", "order": ["right"]})
        assert expand_action(action, "left", routes, 120, STATES).states == ("center", "right")

    def test_sequence_ignores_direct_mode(self, routes):
        action = ActionConfig.model_validate({"order": ["right"], "mode": "direct"})
        assert expand_action(action, "left", routes, 120, STATES).states == ("center", "right")

    def test_action_ms_used(self, routes):
        action = ActionConfig.model_validate({"order": ["left"], "ms": 75})
        assert expand_action(action, "center", routes, 120, STATES).steps == (Step("left", 75),)

    def test_expansion_logged_under_route_category(self, routes, log_records):
        action = ActionConfig.model_validate({"type": "loop", "mode": "direct", "order": ["right"]})
        expand_action(action, "left", routes, 120, STATES)

        assert any(
            level == "DEBUG" and category == "ROUTE" and "expand_direct" in message and "final_state: right" in message
            for level, category, message in log_records
        )
