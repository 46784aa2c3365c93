"""Agent Runtime contract consumed by the console."""

from crux.agent.events import (
    EventType,
    RenderEvent,
    ToolCallEvent,
    ToolResultEvent,
    Usage,
)
from crux.agent.runtime import AgentCallbacks, AgentRuntime, callbacks_for, load_runtime

__all__ = [
    "AgentCallbacks",
    "AgentRuntime",
    "EventType",
    "RenderEvent",
    "ToolCallEvent",
    "ToolResultEvent",
    "Usage",
    "callbacks_for",
    "load_runtime",
]
