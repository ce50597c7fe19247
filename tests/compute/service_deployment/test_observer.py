import subprocess
import sys
import webbrowser

import pytest

from ecsroll.compute.service_deployment import BrowserNotifier, ConsoleObserver
from ecsroll.core.exceptions import BestEffortError

URL = "https://us-west-2.console.aws.amazon.com/codesuite/codedeploy/"


class FakeStdout:
    def __init__(self, tty: bool):
        self.tty = tty

    def isatty(self) -> bool:
        return self.tty

    def write(self, s):
        return len(s)

    def flush(self):
        pass


class FakeBrowser(webbrowser.BaseBrowser):
    def __init__(self, result: bool = True, error: bool = False):
        super().__init__("fake")
        self.result = result
        self.error = error
        self.urls: list[str] = []

    def open(self, url, new=0, autoraise=True):
        if self.error:
            raise webbrowser.Error("no runnable browser")
        self.urls.append(url)
        return self.result


class FakePopen:
    def __init__(self, cmdline, **kwargs):
        self.cmdline = cmdline
        self.kwargs = kwargs


def test_browser_not_opened_without_terminal(monkeypatch):
    browser = FakeBrowser()
    monkeypatch.setattr(sys, "stdout", FakeStdout(tty=False))
    monkeypatch.setattr(webbrowser, "get", lambda: browser)

    BrowserNotifier().notify(URL)

    assert browser.urls == []


def test_browser_opened_on_terminal(monkeypatch):
    browser = FakeBrowser()
    monkeypatch.setattr(sys, "stdout", FakeStdout(tty=True))
    monkeypatch.setattr(webbrowser, "get", lambda: browser)

    BrowserNotifier().notify(URL)

    assert browser.urls == [URL]


@pytest.mark.parametrize("name", ["lynx", "my-browser"])
def test_command_browser_started_in_background(monkeypatch, name):
    started = []

    def popen(cmdline, **kwargs):
        process = FakePopen(cmdline, **kwargs)
        started.append(process)
        return process

    def wait_for_exit(self, url, new=0, autoraise=True):
        raise AssertionError("browser process waited on")

    monkeypatch.setattr(sys, "stdout", FakeStdout(tty=True))
    monkeypatch.setattr(
        webbrowser, "get", lambda: webbrowser.GenericBrowser(name)
    )
    monkeypatch.setattr(webbrowser.GenericBrowser, "open", wait_for_exit)
    monkeypatch.setattr(subprocess, "Popen", popen)

    BrowserNotifier().notify(URL)

    [process] = started
    assert process.cmdline == [name, URL]
    assert process.kwargs["start_new_session"] is True


@pytest.mark.parametrize("failure", ["returns_false", "raises", "no_browser"])
def test_browser_failure(monkeypatch, failure):
    def get():
        if failure == "no_browser":
            raise webbrowser.Error("could not locate runnable browser")
        return FakeBrowser(result=False, error=failure == "raises")

    monkeypatch.setattr(sys, "stdout", FakeStdout(tty=True))
    monkeypatch.setattr(webbrowser, "get", get)

    with pytest.raises(BestEffortError):
        BrowserNotifier().notify(URL)


def test_command_browser_not_found(monkeypatch):
    def popen(cmdline, **kwargs):
        raise FileNotFoundError(cmdline[0])

    monkeypatch.setattr(sys, "stdout", FakeStdout(tty=True))
    monkeypatch.setattr(
        webbrowser, "get", lambda: webbrowser.GenericBrowser("lynx")
    )
    monkeypatch.setattr(subprocess, "Popen", popen)

    with pytest.raises(BestEffortError):
        BrowserNotifier().notify(URL)


def test_console_observer(capsys):
    observer = ConsoleObserver(prefix="web/default")

    observer.log("desired count:", 3)
    observer.debug("appSpecContent:", "version: 1")

    out = capsys.readouterr().out
    assert "[web/default] desired count: 3" in out
    assert "appSpecContent" not in out


def test_console_observer_debug(capsys):
    observer = ConsoleObserver(debug=True)

    observer.debug("appSpecContent:", "version: 1")

    assert "[DEBUG] appSpecContent: version: 1" in capsys.readouterr().out
