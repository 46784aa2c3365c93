"""Default configuration values."""

from typing import Any, Dict

DEFAULT_RUNTIME = "crux.agent.scripted:echo_runtime"

DEFAULT_CONFIG: Dict[str, Any] = {
    "model": {
        "provider": "openai",
        "base_url": "https://api.openai.com",
        "model": "gpt-4o",
        "api_key_env": "OPENAI_API_KEY",
        "temperature": 0.3,
    },
    "agent": {
        "max_steps": 50,
    },
    "runtime": DEFAULT_RUNTIME,
}
