# streetfood_connect/gateway/subscriptions.py
import itertools
import logging
import threading
from typing import Callable, Dict, List, Optional

from .base import Record, SnapshotCallback, Unsubscribe
from .errors import GatewayError

logger = logging.getLogger(__name__)


class SnapshotPoller:
    """
    Re-runs watched queries on a background thread and calls back only when
    a query's result differs from the last one delivered.
    """

    def __init__(self, interval: float = 5.0):
        self.interval = interval
        self._watches: Dict[int, list] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def watch(self, fetch: Callable[[], List[Record]], callback: SnapshotCallback) -> Unsubscribe:
        key = next(self._ids)
        snapshot = fetch()
        with self._lock:
            self._watches[key] = [fetch, callback, snapshot]
        callback(snapshot)
        self._ensure_running()

        def unsubscribe() -> None:
            with self._lock:
                self._watches.pop(key, None)
                idle = not self._watches
            if idle:
                self.stop()

        return unsubscribe

    def poll_once(self) -> None:
        with self._lock:
            watches = list(self._watches.items())
        for key, (fetch, callback, last) in watches:
            try:
                snapshot = fetch()
            except GatewayError as e:
                logger.warning(f"Snapshot poll failed: {e.message}")
                continue
            if snapshot == last:
                continue
            with self._lock:
                if key not in self._watches:
                    continue
                self._watches[key][2] = snapshot
            try:
                callback(snapshot)
            except Exception:
                logger.exception("Snapshot listener raised")

    def stop(self) -> None:
        self._stop.set()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self.interval + 1)

    def _ensure_running(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, args=(self._stop,), name="snapshot-poller", daemon=True)
        self._thread.start()

    def _run(self, stop: threading.Event) -> None:
        while not stop.wait(self.interval):
            self.poll_once()
