import sys
import threading
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence, TextIO

from ..constants import STATUS_INTERVAL_SECONDS

STATUS_MESSAGES = (
    "Running tests... Please wait.",
    "Still running tests... Hang tight!",
    "Tests are still executing... Almost there!",
)
CLEAR_LINE = "\r\033[K"


class StatusTicker:
    """Rewrite one terminal line with a progress message until stopped."""

    def __init__(
        self,
        messages: Sequence[str] = STATUS_MESSAGES,
        interval: float = STATUS_INTERVAL_SECONDS,
        stream: Optional[TextIO] = None,
    ):
        self.messages = list(messages)
        self.interval = interval
        self.stream = stream or sys.stdout
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=self.interval + 1)
            self._thread = None

    def _run(self) -> None:
        i = 0
        while not self._stop.is_set():
            self.stream.write(f"{CLEAR_LINE}{self.messages[i % len(self.messages)]}")
            self.stream.flush()
            i += 1
            self._stop.wait(self.interval)
        self.stream.write(CLEAR_LINE)
        self.stream.flush()


@contextmanager
def status_ticker(enabled: bool = True, **kwargs) -> Iterator[None]:
    if not enabled:
        yield
        return
    ticker = StatusTicker(**kwargs)
    ticker.start()
    try:
        yield
    finally:
        ticker.stop()
