import pytest

from crux.config import DEFAULT_CONFIG, crux_home, deep_merge, load_config


@pytest.fixture
def home(tmp_path, monkeypatch):
    monkeypatch.setenv("CRUX_HOME", str(tmp_path))
    return tmp_path


class TestCruxHome:
    def test_env_override(self, home):
        assert crux_home() == str(home)
        assert crux_home("logs") == str(home / "logs")

    def test_default_under_user_home(self, monkeypatch, tmp_path):
        monkeypatch.delenv("CRUX_HOME", raising=False)
        monkeypatch.setattr("sys.platform", "linux")
        monkeypatch.setenv("HOME", str(tmp_path))
        assert crux_home() == str(tmp_path / ".crux")


class TestDeepMerge:
    def test_nested_mappings_merge(self):
        merged = deep_merge({"a": {"x": 1, "y": 2}, "b": 1}, {"a": {"y": 3}})
        assert merged == {"a": {"x": 1, "y": 3}, "b": 1}

    def test_none_is_ignored_and_scalars_replace(self):
        assert deep_merge({"a": {"x": 1}, "b": 1}, {"a": "flat", "b": None}) == {"a": "flat", "b": 1}

    def test_base_not_mutated(self):
        base = {"a": {"x": 1}}
        deep_merge(base, {"a": {"x": 2}})
        assert base == {"a": {"x": 1}}


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, home):
        config = load_config()
        assert config == DEFAULT_CONFIG
        config["model"]["model"] = "changed"
        assert DEFAULT_CONFIG["model"]["model"] == "gpt-4o"

    def test_user_values_merge_over_defaults(self, home):
        (home / "config.yaml").write_text(
            "model:\n  model: claude-ops\nagent:\n  max_steps: 10\n", encoding="utf-8"
        )
        config = load_config()
        assert config["model"]["model"] == "claude-ops"
        assert config["model"]["provider"] == "openai"
        assert config["agent"]["max_steps"] == 10
        assert config["runtime"] == DEFAULT_CONFIG["runtime"]

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("runtime: my.module:factory\n", encoding="utf-8")
        assert load_config(str(path))["runtime"] == "my.module:factory"

    @pytest.mark.parametrize("content", ["model: [unclosed\n", "- just\n- a list\n", ""])
    def test_malformed_or_empty_falls_back(self, home, content):
        (home / "config.yaml").write_text(content, encoding="utf-8")
        assert load_config() == DEFAULT_CONFIG
