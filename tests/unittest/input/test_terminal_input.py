import asyncio
import os
import pty
import termios

import pytest
from prompt_toolkit.keys import Keys

from crux.cli.input.terminal import BRACKETED_PASTE_OFF, BRACKETED_PASTE_ON, TerminalInput


@pytest.fixture
def pipe():
    read_fd, write_fd = os.pipe()
    stdin = open(read_fd, "r", closefd=False)
    yield stdin, write_fd
    stdin.close()
    for fd in (read_fd, write_fd):
        try:
            os.close(fd)
        except OSError:
            pass


async def _wait_for(predicate, timeout=1.0):
    deadline = asyncio.get_running_loop().time() + timeout
    while not predicate():
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.01)


def _names(keys):
    return [k.key for k in keys]


class TestTerminalInput:
    def test_pipe_is_not_a_tty(self, pipe):
        assert TerminalInput(pipe[0]).is_tty is False

    def test_session_is_noop_without_tty(self, pipe):
        written = []
        terminal = TerminalInput(pipe[0], write=written.append)
        with terminal.session():
            pass
        assert written == []

    def test_session_enables_bracketed_paste(self):
        master, slave = pty.openpty()
        try:
            with open(slave, "r", closefd=False) as stdin:
                written = []
                terminal = TerminalInput(stdin, write=written.append)
                assert terminal.is_tty

                with terminal.session():
                    assert written == [BRACKETED_PASTE_ON]
                    assert not termios.tcgetattr(slave)[3] & termios.ECHO

                assert written == [BRACKETED_PASTE_ON, BRACKETED_PASTE_OFF]
                assert termios.tcgetattr(slave)[3] & termios.ECHO
        finally:
            os.close(master)
            os.close(slave)

    @pytest.mark.asyncio
    async def test_listener_receives_keys(self, pipe):
        stdin, write_fd = pipe
        terminal = TerminalInput(stdin)
        received = []

        with terminal.listen(received.extend):
            assert terminal.has_listener
            os.write(write_fd, b"hi\x03")
            await _wait_for(lambda: len(received) == 3)

        assert _names(received) == ["h", "i", Keys.ControlC]
        assert not terminal.has_listener

    @pytest.mark.asyncio
    async def test_escape_sequence_split_across_reads(self, pipe):
        stdin, write_fd = pipe
        terminal = TerminalInput(stdin, flush_timeout=5)
        received = []

        with terminal.listen(received.extend):
            os.write(write_fd, b"ab\x1b")
            await _wait_for(lambda: len(received) == 2)
            os.write(write_fd, b"[A")
            await _wait_for(lambda: len(received) == 3)

        assert _names(received) == ["a", "b", Keys.Up]

    @pytest.mark.asyncio
    async def test_lone_escape_is_flushed(self, pipe):
        stdin, write_fd = pipe
        terminal = TerminalInput(stdin, flush_timeout=0.01)
        received = []

        with terminal.listen(received.extend):
            os.write(write_fd, b"\x1b")
            await _wait_for(lambda: received)

        assert _names(received) == [Keys.Escape]

    @pytest.mark.asyncio
    async def test_only_one_listener(self, pipe):
        terminal = TerminalInput(pipe[0])
        with terminal.listen(lambda keys: None):
            with pytest.raises(RuntimeError):
                with terminal.listen(lambda keys: None):
                    pass
            assert terminal.has_listener

    @pytest.mark.asyncio
    async def test_listener_detached_on_error(self, pipe):
        terminal = TerminalInput(pipe[0])
        with pytest.raises(ValueError):
            with terminal.listen(lambda keys: None):
                raise ValueError("boom")
        assert not terminal.has_listener
        with terminal.listen(lambda keys: None):
            pass

    @pytest.mark.asyncio
    async def test_end_of_input_delivers_empty_list(self, pipe):
        stdin, write_fd = pipe
        terminal = TerminalInput(stdin)
        received = []

        with terminal.listen(received.append):
            os.close(write_fd)
            await _wait_for(lambda: received)

        assert received[0] == []
