import logging

from crux.core.logging.logger import console, get_log_path, setup_logging


class TestSetupLogging:
    def test_debug_writes_dated_file(self, tmp_path):
        path = setup_logging(debug=True, log_dir=str(tmp_path))
        try:
            assert path == get_log_path()
            assert path.startswith(str(tmp_path))
            assert "debug-" in path

            logging.getLogger("crux.cli.test").debug("dispatching tool_call")
            for handler in logging.getLogger("crux").handlers:
                handler.flush()

            with open(path, encoding="utf-8") as f:
                assert "dispatching tool_call" in f.read()
        finally:
            setup_logging(debug=False)

    def test_default_is_silent(self, capsys):
        assert setup_logging(debug=False) is None
        assert get_log_path() is None

        logging.getLogger("crux.cli.test").warning("not for the terminal")
        captured = capsys.readouterr()
        assert "not for the terminal" not in captured.out
        assert "not for the terminal" not in captured.err

    def test_repeated_setup_does_not_stack_handlers(self, tmp_path):
        setup_logging(debug=True, log_dir=str(tmp_path))
        setup_logging(debug=True, log_dir=str(tmp_path))
        try:
            assert len(logging.getLogger("crux").handlers) == 1
        finally:
            setup_logging(debug=False)


def test_console_respects_verbose(capsys):
    console("shown")
    console("hidden", verbose=False)
    out = capsys.readouterr().out
    assert "shown" in out
    assert "hidden" not in out
