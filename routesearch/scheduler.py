import logging
import threading

logger = logging.getLogger(__name__)


class Ticker:
    """
    Calls `callback` once per `period` seconds on a background thread.

    Ticks never overlap: the wait for the next tick only starts once the
    previous callback has returned. stop() lets a running callback finish.
    If the callback raises, the ticker stops and keeps the exception in `error`.
    """

    def __init__(self, callback, period: float = 1.0):
        if period <= 0:
            raise ValueError(f"period must be positive, got {period}")
        self.callback = callback
        self.period = period
        self.ticks = 0
        self.error = None
        self._stop_event = threading.Event()
        self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        thread = self._thread
        if thread is not None and thread.is_alive():
            if not self._stop_event.is_set():
                return
            if thread is threading.current_thread():
                # restarted from inside a tick: keep the current loop going
                self._stop_event.clear()
                return
            # a stopping thread may still be finishing its last tick
            thread.join()
        self.error = None
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._loop, name="routesearch-ticker", daemon=True)
        self._thread.start()

    def stop(self, timeout: float = None):
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def toggle(self) -> bool:
        """Start if stopped, stop if running. Returns the new running state."""
        if self.running:
            self.stop()
            return False
        self.start()
        return True

    def _loop(self):
        while not self._stop_event.wait(self.period):
            try:
                self.callback()
            except Exception as e:
                logger.exception("Tick %d failed, stopping", self.ticks + 1)
                self.error = e
                self._stop_event.set()
                break
            self.ticks += 1

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False
