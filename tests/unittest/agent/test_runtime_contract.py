import pytest

from crux.agent.events import (
    CompletePayload,
    EventType,
    RenderEvent,
    ToolCallEvent,
    ToolResultEvent,
    Usage,
)
from crux.agent.runtime import AgentRuntime, callbacks_for, load_runtime
from crux.agent.scripted import ScriptedRuntime
from crux.config import DEFAULT_CONFIG


class TestUsage:
    def test_total(self):
        assert Usage(10, 5).total_tokens == 15

    @pytest.mark.parametrize(
        "value",
        [
            {"prompt_tokens": 2, "completion_tokens": 3},
            {"promptTokens": 2, "completionTokens": 3},
            Usage(2, 3),
        ],
    )
    def test_coerce(self, value):
        assert Usage.coerce(value) == Usage(2, 3)

    def test_coerce_none(self):
        assert Usage.coerce(None).total_tokens == 0


class TestRenderEvent:
    def test_terminal_events(self):
        assert RenderEvent.complete().event_type.is_terminal
        assert RenderEvent.error("x").event_type.is_terminal
        assert not RenderEvent.output_end().event_type.is_terminal

    def test_complete_payload(self):
        event = RenderEvent.complete("done", {"prompt_tokens": 1, "completion_tokens": 1})
        assert event.data == CompletePayload("done", Usage(1, 1))


class TestCallbacksFor:
    def test_every_callback_becomes_one_event(self):
        events = []
        callbacks = callbacks_for(events.append)

        callbacks.on_thinking_start()
        callbacks.on_thinking("t")
        callbacks.on_thinking_end()
        callbacks.on_output_start()
        callbacks.on_output("o")
        callbacks.on_output_end()
        callbacks.on_tool_call(ToolCallEvent("1", "exec_command", {"command": "ls"}))
        callbacks.on_tool_result(ToolResultEvent("1", "exec_command", "{}", False))
        callbacks.on_complete("r", Usage(1, 2))
        callbacks.on_error("e")

        assert [e.event_type for e in events] == list(EventType)
        assert events[1].data == "t"
        assert events[6].data.args == {"command": "ls"}
        assert events[8].data.usage.total_tokens == 3


class TestLoadRuntime:
    def test_default_runtime(self):
        runtime = load_runtime("crux.agent.scripted:echo_runtime", DEFAULT_CONFIG)
        assert isinstance(runtime, ScriptedRuntime)
        assert isinstance(runtime, AgentRuntime)

    @pytest.mark.parametrize("factory_path", ["crux.agent.scripted", ":echo_runtime", "crux.agent.scripted:"])
    def test_malformed_path(self, factory_path):
        with pytest.raises(ValueError):
            load_runtime(factory_path, DEFAULT_CONFIG)

    def test_factory_must_return_runtime(self):
        with pytest.raises(ValueError):
            load_runtime("builtins:dict", DEFAULT_CONFIG)

    def test_missing_module(self):
        with pytest.raises(ImportError):
            load_runtime("crux.no_such_module:factory", DEFAULT_CONFIG)
