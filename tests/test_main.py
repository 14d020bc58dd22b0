import termios
from contextlib import contextmanager

import pytest

import coindash.app as app
import coindash.terminal as terminal
from coindash.provider import FetchResult
from coindash.terminal import TerminalError

from conftest import FakeKeys, FakeProvider, make_coins


class ClosingProvider(FakeProvider):
    closed = False

    def close(self):
        self.closed = True


class FakeLive:
    def __init__(self):
        self.updates = 0

    def update(self, renderable, refresh=False):
        self.updates += 1


@pytest.fixture
def wired(tmp_path, monkeypatch):
    """Patch main()'s collaborators; returns the fake provider."""
    provider = ClosingProvider(FetchResult.ok(make_coins(3)))
    monkeypatch.setattr(app, "CoinGeckoProvider", lambda *a, **kw: provider)
    monkeypatch.setattr(app, "setup_logging", lambda *a, **kw: None)
    monkeypatch.setenv("COINDASH_CONFIG", str(tmp_path / "missing.ini"))
    return provider


def test_terminal_setup_failure_exits_nonzero(wired, monkeypatch, capsys):
    @contextmanager
    def broken_session(console, initial):
        raise TerminalError("cannot set up terminal: not a tty")
        yield  # pragma: no cover

    monkeypatch.setattr(app, "terminal_session", broken_session)
    assert app.main([]) == 1
    assert "not a tty" in capsys.readouterr().err
    assert wired.closed


def test_normal_quit_exits_zero(wired, monkeypatch, capsys):
    live = FakeLive()

    @contextmanager
    def fake_session(console, initial):
        yield live, FakeKeys("j", "q")

    monkeypatch.setattr(app, "terminal_session", fake_session)
    assert app.main(["--currency", "EUR"]) == 0
    assert wired.calls == ["eur"]
    assert live.updates >= 2
    assert "Goodbye" in capsys.readouterr().out


def test_initial_fetch_failure_still_starts(wired, monkeypatch, capsys):
    wired.results = [FetchResult.fail("connection error: refused")]

    @contextmanager
    def fake_session(console, initial):
        yield FakeLive(), FakeKeys("q")

    monkeypatch.setattr(app, "terminal_session", fake_session)
    assert app.main([]) == 0
    assert "Could not fetch initial data" in capsys.readouterr().out


def test_version_flag(capsys):
    with pytest.raises(SystemExit) as exc:
        app.main(["--version"])
    assert exc.value.code == 0
    assert "coindash 0.1.0" in capsys.readouterr().out


def test_terminal_restore_failure_exits_nonzero(wired, pty_stdin, monkeypatch, capsys):
    def fail(fd, when, attrs):
        raise termios.error(5, "Input/output error")

    monkeypatch.setattr(terminal.KeyReader, "poll", lambda self, timeout: "q")
    monkeypatch.setattr(terminal.termios, "tcsetattr", fail)
    assert app.main([]) == 1
    assert "cannot restore terminal" in capsys.readouterr().err
    assert wired.closed


def test_closed_stdin_exits_nonzero(wired, pty_stdin, monkeypatch, capsys):
    def closed(self, timeout):
        raise TerminalError("stdin closed")

    monkeypatch.setattr(terminal.KeyReader, "poll", closed)
    assert app.main([]) == 1
    assert "stdin closed" in capsys.readouterr().err
