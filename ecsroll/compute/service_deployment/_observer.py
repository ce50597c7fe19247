import subprocess
import sys
import webbrowser
from datetime import datetime
from typing import Any

from ecsroll.core.exceptions import BestEffortError


class DeployObserver:
    """Receives progress messages of a deploy."""

    def log(self, *args: Any) -> None:
        pass

    def debug(self, *args: Any) -> None:
        pass


class ConsoleObserver(DeployObserver):
    prefix: str
    debug_enabled: bool

    def __init__(self, prefix: str = "", debug: bool = False):
        self.prefix = prefix
        self.debug_enabled = debug

    def log(self, *args: Any) -> None:
        timestamp = datetime.now().strftime("%Y/%m/%d %H:%M:%S")
        if self.prefix:
            print(timestamp, f"[{self.prefix}]", *args)
        else:
            print(timestamp, *args)

    def debug(self, *args: Any) -> None:
        if self.debug_enabled:
            self.log("[DEBUG]", *args)


class URLNotifier:
    """Tells the operator where a submitted deployment can be followed."""

    def notify(self, url: str) -> None:
        pass


class BrowserNotifier(URLNotifier):
    """Opens the URL in the default browser when attached to a terminal.

    The browser is started in the background and never waited on.
    """

    def notify(self, url: str) -> None:
        if not sys.stdout.isatty():
            return
        try:
            browser = webbrowser.get()
            if isinstance(browser, webbrowser.GenericBrowser):
                opened = self._start(browser, url)
            else:
                opened = browser.open(url)
        except (webbrowser.Error, OSError) as e:
            raise BestEffortError(f"Couldn't open URL {url}: {e}") from e
        if not opened:
            raise BestEffortError(f"Couldn't open URL {url}")

    def _start(self, browser: webbrowser.GenericBrowser, url: str) -> bool:
        # GenericBrowser.open blocks until the browser process exits
        cmdline = [browser.name] + [
            arg.replace("%s", url) for arg in browser.args
        ]
        subprocess.Popen(
            cmdline,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
        return True
