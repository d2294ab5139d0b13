"""
Tests for LogicBuilder.

Tests for:
- Cache identity and props refresh
- Construction order of defaults, hooks and build steps
- Build heap balance on failure
- Auto-connect while building and while a listener runs
"""

from unittest.mock import MagicMock

import pytest

from logickit import (
    CircularBuildError,
    EngineOptions,
    LogicBuilder,
    MissingKeyError,
    Plugin,
    PluginError,
    activate_plugin,
    get_built_logic,
    reset_context,
)

# =============================================================================
# Cache Tests
# =============================================================================


class TestBuildCache:
    """Tests for single construction and reuse."""

    def test_same_path_returns_same_logic(self, context):
        before_build, after_build = MagicMock(), MagicMock()
        activate_plugin(Plugin(name="spy", before_build=before_build, after_build=after_build))
        input = {"path": ["scenes", "home"]}

        first = get_built_logic([input])
        second = get_built_logic([input])

        assert first is second
        assert context.build.cache["scenes.home"] is first
        before_build.assert_called_once()
        after_build.assert_called_once()

    def test_props_refreshed_without_rebuild(self, item_input):
        step = MagicMock()
        activate_plugin(Plugin(name="steps", build_order={"main": {}}, build_steps={"main": step}))
        props_1 = {"id": 7}
        props_2 = {"id": 7, "extra": True}

        first = get_built_logic([item_input], props_1)
        second = get_built_logic([item_input], props_2)

        assert first is second
        assert second.props is props_2
        assert second.props["extra"] is True
        step.assert_called_once()

    def test_keyed_path_string(self, item_input):
        logic = get_built_logic([item_input], {"id": 7})

        assert logic.path == ("item", 7)
        assert logic.path_string == "item.7"
        assert logic.key == 7

    def test_different_keys_build_different_logic(self, item_input):
        first = get_built_logic([item_input], {"id": 1})
        second = get_built_logic([item_input], {"id": 2})

        assert first is not second

    def test_missing_key_raises_and_caches_nothing(self, context, item_input):
        before_build = MagicMock()
        activate_plugin(Plugin(name="spy", before_build=before_build))

        with pytest.raises(MissingKeyError):
            get_built_logic([item_input], {"name": "no id"})

        assert context.build.cache == {}
        assert context.build.heap == []
        before_build.assert_not_called()

    def test_empty_inputs_raise(self):
        with pytest.raises(ValueError):
            get_built_logic([])

    def test_wrapper_and_props_stored(self):
        wrapper = object()
        logic = get_built_logic([{"path": ["w"]}], {"a": 1}, wrapper)

        assert logic.wrapper is wrapper
        assert logic.props == {"a": 1}

    def test_builder_on_explicit_context(self, context):
        other = reset_context()
        logic = LogicBuilder(context).get_built_logic([{"path": ["isolated"]}])

        assert context.build.cache["isolated"] is logic
        assert "isolated" not in other.build.cache


# =============================================================================
# Construction Tests
# =============================================================================


class TestConstruction:
    """Tests for defaults, hooks and build steps."""

    def test_self_connection(self):
        logic = get_built_logic([{"path": ["self"]}])
        assert logic.connections[logic.path_string] is logic

    def test_hook_and_step_order(self):
        calls = []

        def record(name):
            return lambda logic, arg: calls.append((name, arg if isinstance(arg, dict) else len(arg)))

        activate_plugin(
            Plugin(
                name="recorder",
                before_build=record("before_build"),
                after_build=record("after_build"),
                before_logic=record("before_logic"),
                after_logic=record("after_logic"),
                build_order={"first": {}, "second": {}},
                build_steps={"second": record("second"), "first": record("first")},
            )
        )
        input = {"path": ["ordered"]}

        get_built_logic([input])

        assert [name for name, _ in calls] == [
            "before_build",
            "before_logic",
            "first",
            "second",
            "after_logic",
            "after_build",
        ]

    def test_self_connection_present_in_after_build(self):
        seen = {}

        def after_build(logic, inputs):
            seen["self"] = logic.connections.get(logic.path_string)

        activate_plugin(Plugin(name="check", after_build=after_build))
        logic = get_built_logic([{"path": ["checked"]}])

        assert seen["self"] is logic

    def test_extend_applied_recursively_in_order(self, values_plugin):
        activate_plugin(values_plugin)
        input = {
            "path": ["extended"],
            "values": {"a": 1, "order": ["base"]},
            "extend": [
                {"values": {"b": 2}, "extend": [{"values": {"c": 3}}]},
                {"values": {"a": 10}},
            ],
        }

        logic = get_built_logic([input])

        assert logic.values == {"a": 10, "b": 2, "c": 3, "order": ["base"]}

    def test_multiple_inputs_applied_in_order(self, values_plugin):
        activate_plugin(values_plugin)

        logic = get_built_logic([{"path": ["multi"], "values": {"x": 1}}, {"values": {"x": 2}}])

        assert logic.values == {"x": 2}

    def test_defaults_last_registration_wins(self):
        activate_plugin(Plugin(name="a", defaults={"mode": "a", "only_a": True}))
        activate_plugin(Plugin(name="b", defaults=lambda: {"mode": "b"}))

        logic = get_built_logic([{"path": ["defaults"]}])

        assert logic.mode == "b"
        assert logic.only_a is True

    def test_step_output_overrides_defaults(self):
        def step(logic, input):
            logic.mode = "step"

        activate_plugin(
            Plugin(name="a", defaults={"mode": "default"}, build_order={"s": {}}, build_steps={"s": step})
        )

        assert get_built_logic([{"path": ["override"]}]).mode == "step"

    def test_defaults_cannot_overwrite_identity(self, context):
        activate_plugin(Plugin(name="bad", defaults={"path_string": "hijacked"}))

        with pytest.raises(PluginError):
            get_built_logic([{"path": ["guarded"]}])

        assert context.build.cache == {}

    def test_logic_extend_after_build(self, values_plugin):
        activate_plugin(values_plugin)
        logic = get_built_logic([{"path": ["late"], "values": {"a": 1}}])

        result = logic.extend({"values": {"b": 2}})

        assert result is logic
        assert logic.values == {"a": 1, "b": 2}


# =============================================================================
# Failure Tests
# =============================================================================


class TestBuildFailure:
    """Tests for errors raised during a build."""

    def test_step_error_propagates_and_heap_is_balanced(self, context):
        def failing(logic, input):
            raise RuntimeError("step failed")

        activate_plugin(Plugin(name="fail", build_order={"s": {}}, build_steps={"s": failing}))

        with pytest.raises(RuntimeError, match="step failed"):
            get_built_logic([{"path": ["broken"]}])

        assert context.build.heap == []
        assert "broken" not in context.build.cache

    def test_nested_failure_keeps_heap_balanced(self, context):
        inner = {"path": ["inner"], "fail": True}
        outer = {"path": ["outer"], "build": inner}
        heap_sizes = []

        def step(logic, input):
            heap_sizes.append(len(context.build.heap))
            if input.get("fail"):
                raise RuntimeError("inner failed")
            if "build" in input:
                get_built_logic([input["build"]])

        activate_plugin(Plugin(name="nested", build_order={"s": {}}, build_steps={"s": step}))

        with pytest.raises(RuntimeError, match="inner failed"):
            get_built_logic([outer])

        assert heap_sizes == [1, 2]
        assert context.build.heap == []
        assert context.build.cache == {}

    def test_failed_build_can_be_retried(self, context):
        attempts = {"count": 0}

        def flaky(logic, input):
            attempts["count"] += 1
            if attempts["count"] == 1:
                raise RuntimeError("first attempt")

        activate_plugin(Plugin(name="flaky", build_order={"s": {}}, build_steps={"s": flaky}))
        input = {"path": ["flaky"]}

        with pytest.raises(RuntimeError):
            get_built_logic([input])
        logic = get_built_logic([input])

        assert context.build.cache["flaky"] is logic
        assert logic.connections["flaky"] is logic

    def test_circular_build_raises(self, context):
        a = {"path": ["a"]}
        b = {"path": ["b"], "build": a}
        a["build"] = b

        def step(logic, input):
            get_built_logic([input["build"]])

        activate_plugin(Plugin(name="cycle", build_order={"s": {}}, build_steps={"s": step}))

        with pytest.raises(CircularBuildError) as exc_info:
            get_built_logic([a])

        assert exc_info.value.chain == ["a", "b"]
        assert context.build.heap == []


# =============================================================================
# Auto-connect Tests
# =============================================================================


def _connect_step(logic, input):
    for dependency in input.get("connect", []):
        get_built_logic([dependency], auto_connect_in_listener=input.get("in_listener", True))


class TestAutoConnectWhileBuilding:
    """Logic built during another build becomes its dependency."""

    def setup_method(self):
        self.plugin = Plugin(
            name="connect",
            build_order={"connect": {}},
            build_steps={"connect": _connect_step},
        )

    @pytest.mark.parametrize("in_listener", [True, False])
    def test_dependency_connected_regardless_of_flag(self, in_listener):
        activate_plugin(self.plugin)
        dependency = {"path": ["dep"]}

        parent = get_built_logic([{"path": ["parent"], "connect": [dependency], "in_listener": in_listener}])
        dep = get_built_logic([dependency])

        assert parent.connections["dep"] is dep
        assert list(parent.connections) == ["dep", "parent"]

    def test_transitive_connections(self):
        activate_plugin(self.plugin)
        leaf = {"path": ["leaf"]}
        middle = {"path": ["middle"], "connect": [leaf]}

        top = get_built_logic([{"path": ["top"], "connect": [middle]}])

        assert list(top.connections) == ["leaf", "middle", "top"]

    def test_cached_dependency_connected_once(self):
        activate_plugin(self.plugin)
        dependency = {"path": ["shared"]}
        get_built_logic([dependency])

        parent = get_built_logic([{"path": ["twice"], "connect": [dependency, dependency]}])

        assert list(parent.connections) == ["shared", "twice"]

    def test_no_connection_when_disabled(self):
        reset_context(EngineOptions(auto_connect=False))
        activate_plugin(self.plugin)

        parent = get_built_logic([{"path": ["parent"], "connect": [{"path": ["dep"]}]}])

        assert list(parent.connections) == ["parent"]

    def test_top_level_build_not_connected(self, context):
        logic = get_built_logic([{"path": ["alone"]}])

        assert list(logic.connections) == ["alone"]
        assert context.mount.counter == {}


class TestAutoConnectInListener:
    """Logic built while another logic's listener runs."""

    def test_connected_and_mounted(self, context):
        runner = get_built_logic([{"path": ["runner"]}])
        runner.mount()

        with context.running(runner):
            built = get_built_logic([{"path": ["lazy"]}])

        assert runner.connections["lazy"] is built
        assert context.mount.counter["lazy"] == context.mount.counter["runner"] == 1

    def test_mounted_with_runner_count(self, context):
        runner = get_built_logic([{"path": ["runner"]}])
        runner.mount()
        runner.mount()

        with context.running(runner):
            get_built_logic([{"path": ["lazy"]}])

        assert context.mount.counter["lazy"] == 2

    def test_unmounted_with_runner(self, context):
        runner = get_built_logic([{"path": ["runner"]}])
        unmount = runner.mount()
        with context.running(runner):
            get_built_logic([{"path": ["lazy"]}])

        unmount()

        assert context.mount.counter == {}
        assert context.build.cache == {}

    def test_flag_false_suppresses_connection_and_mount(self, context):
        runner = get_built_logic([{"path": ["runner"]}])
        runner.mount()

        with context.running(runner):
            get_built_logic([{"path": ["lazy"]}], auto_connect_in_listener=False)

        assert "lazy" not in runner.connections
        assert "lazy" not in context.mount.counter

    def test_second_request_does_not_mount_again(self, context):
        runner = get_built_logic([{"path": ["runner"]}])
        runner.mount()

        with context.running(runner):
            get_built_logic([{"path": ["lazy"]}])
            get_built_logic([{"path": ["lazy"]}])

        assert context.mount.counter["lazy"] == 1

    def test_build_heap_takes_precedence(self, context):
        runner = get_built_logic([{"path": ["runner"]}])
        activate_plugin(
            Plugin(name="connect", build_order={"connect": {}}, build_steps={"connect": _connect_step})
        )

        with context.running(runner):
            parent = get_built_logic(
                [{"path": ["parent"], "connect": [{"path": ["dep"]}]}],
                auto_connect_in_listener=False,
            )

        assert "dep" in parent.connections
        assert "dep" not in runner.connections
        assert "parent" not in runner.connections

    def test_built_in_mount_hook_follows_mounting_logic(self, context):
        lazy = {"path": ["lazy"]}

        def after_mount(logic):
            if logic.path_string == "runner":
                get_built_logic([lazy])

        activate_plugin(Plugin(name="listener", after_mount=after_mount))
        runner = get_built_logic([{"path": ["runner"]}])

        unmount = runner.mount()
        assert runner.connections["lazy"] is context.build.cache["lazy"]
        assert context.mount.counter["lazy"] == 1

        unmount()
        assert context.build.cache == {}
