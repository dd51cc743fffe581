"""Backend counterpart of a module.

A NodeHelper fetches data (from HTTP APIs, feeds, etc.) in a background
thread and hands it to its module as a socket notification. The module
front-end doesn't care where data comes from -- it just reacts to
socket_notification_received().
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from core.notification_bus import NotificationBus

logger = logging.getLogger(__name__)


class NodeHelper(ABC):
    """Base class for module backends.

    Subclasses implement fetch() which runs in a background thread.
    Results are delivered under self.notification.
    """

    notification = "DATA"

    def __init__(self, module, bus: NotificationBus, config: Dict):
        self.module = module
        self.bus = bus
        self.config = config
        self.interval = config.get("update_interval", 600.0)  # seconds
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def helper_id(self) -> str:
        return f"{self.module.identifier}.helper"

    def start(self):
        """Start the background polling thread."""
        if self._thread and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, daemon=True, name=f"helper-{self.module.identifier}"
        )
        self._thread.start()
        logger.info("Node helper for %s started (%.1fs interval)", self.module.name, self.interval)

    def stop(self):
        """Signal the background thread to stop."""
        self._stop.set()

    @property
    def running(self) -> bool:
        return bool(self._thread and self._thread.is_alive() and not self._stop.is_set())

    def send_socket_notification(self, notification: str, payload: Any):
        """Push a result to the module and to bus listeners."""
        self.bus.publish(notification, payload, sender=self.helper_id)
        try:
            self.module.socket_notification_received(notification, payload)
        except Exception as exc:
            logger.error("Module %s socket notification error: %s", self.module.name, exc)

    def socket_notification_received(self, notification: str, payload: Any):
        """Handle a notification sent by the module. Override if needed."""
        logger.debug("Node helper %s ignored %s", self.helper_id, notification)

    def _run(self):
        """Poll loop -- fetch data and publish, sleep in small chunks."""
        while not self._stop.is_set():
            try:
                data = self.fetch()
                if data is not None:
                    self.send_socket_notification(self.notification, data)
            except Exception as exc:
                logger.error("Node helper %s fetch error: %s", self.helper_id, exc)

            # Sleep in 0.1s chunks so stop() is responsive
            chunks = int(self.interval * 10)
            for _ in range(max(chunks, 1)):
                if self._stop.is_set():
                    break
                time.sleep(0.1)

    @abstractmethod
    def fetch(self) -> Optional[Dict[str, Any]]:
        """Fetch data. Runs in background thread.

        Returns:
            Payload dict, or None to skip this cycle.
        """
        ...

    def close(self):
        """Release resources. Override if needed."""
        self.stop()
