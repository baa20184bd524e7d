import threading
from typing import Optional


class SingleSlotQueue[T]:
    """Thread-safe, size=1, latest-wins hand-off from the playback thread to the UI.

    Intermediate snapshots are dropped if the consumer falls behind; the UI only
    ever needs the newest frame.
    """

    def __init__(self) -> None:
        self._condition = threading.Condition()
        self._has_value = False
        self._value: Optional[T] = None
        self._closed = False
        self._dropped = 0

    @property
    def closed(self) -> bool:
        with self._condition:
            return self._closed

    @property
    def dropped(self) -> int:
        """Number of published items that were overwritten before being read."""
        with self._condition:
            return self._dropped

    def publish(self, item: T) -> bool:
        """Publish an item, replacing any unread one. Returns False once the queue is closed."""
        with self._condition:
            if self._closed:
                return False
            if self._has_value:
                self._dropped += 1
            self._value = item
            self._has_value = True
            self._condition.notify()
            return True

    def close(self) -> None:
        """Close the queue. A pending item can still be read."""
        with self._condition:
            self._closed = True
            self._condition.notify_all()

    def get(self, timeout: Optional[float] = None) -> Optional[T]:
        """Block until an item is available or the queue is closed. Returns None on close."""
        with self._condition:
            ok = self._condition.wait_for(lambda: self._has_value or self._closed, timeout)
            if not ok:
                raise TimeoutError("queue get() timed out")
            if not self._has_value:
                return None
            value = self._value
            self._value = None
            self._has_value = False
            return value
