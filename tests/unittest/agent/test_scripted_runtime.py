import pytest

from crux.agent.events import EventType, RenderEvent
from crux.agent.runtime import callbacks_for
from crux.agent.scripted import ScriptedRuntime, echo_runtime, echo_script
from crux.core.common.exceptions import AbortError


class TestScriptedRuntime:
    @pytest.mark.asyncio
    async def test_echo_streams_prompt_back(self):
        events = []
        runtime = ScriptedRuntime(echo_script)

        await runtime.run("restart the web tier", callbacks_for(events.append))

        chunks = [e.data for e in events if e.event_type == EventType.OUTPUT_CHUNK]
        assert "".join(chunks) == "restart the web tier"
        assert events[-1].event_type == EventType.COMPLETE
        assert events[-1].data.usage.total_tokens == 8
        assert runtime.prompts == ["restart the web tier"]
        assert not runtime.is_running

    @pytest.mark.asyncio
    async def test_complete_appended_when_missing(self):
        events = []
        runtime = ScriptedRuntime(lambda prompt: [RenderEvent.output_chunk("x")])
        await runtime.run("p", callbacks_for(events.append))
        assert [e.event_type for e in events] == [EventType.OUTPUT_CHUNK, EventType.COMPLETE]

    @pytest.mark.asyncio
    async def test_abort_ends_run_with_abort_error(self):
        events = []
        runtime = ScriptedRuntime(echo_script)

        def dispatch(event):
            events.append(event)
            if event.event_type == EventType.THINKING_CHUNK:
                runtime.abort()

        await runtime.run("a b c", callbacks_for(dispatch))

        assert events[-1].event_type == EventType.ERROR
        assert isinstance(events[-1].data, AbortError)
        assert EventType.COMPLETE not in [e.event_type for e in events]
        assert runtime.abort_calls == 1

    def test_abort_without_run_is_harmless(self):
        runtime = ScriptedRuntime(echo_script)
        runtime.abort()
        assert runtime.abort_calls == 1

    def test_echo_runtime_reads_delay(self):
        runtime = echo_runtime({"agent": {"echo_delay": 0}})
        assert isinstance(runtime, ScriptedRuntime)
