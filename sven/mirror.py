"""Mirror inbound desk messages from the bus into the state store."""

from __future__ import annotations

import logging

from .config import Topics
from .models import DecodeError, DeskState, decode_status
from .state import DeskStateStore


class BusMirror:
    """Routes inbound MQTT messages by topic.

    A payload that fails to decode is logged and dropped; the store keeps its
    previous value. Nothing raised here is allowed to reach the paho network
    thread, so one bad message never stops the mirror.
    """

    def __init__(self, store: DeskStateStore, topics: Topics, logger: logging.Logger | None = None) -> None:
        self.store = store
        self.topics = topics
        self._logger = logger or logging.getLogger(__name__)

    def on_message(self, _client, _userdata, msg) -> None:  # type: ignore[no-untyped-def]
        try:
            self.handle_message(msg.topic, msg.payload)
        except Exception as exc:  # pylint: disable=broad-except
            self._logger.error("[mirror] Handler failed for topic '%s': %s", msg.topic, exc, exc_info=True)

    def handle_message(self, topic: str, payload: bytes) -> None:
        self._logger.debug("[mirror] Received %s: %r", topic, payload)
        if topic == self.topics.state:
            self._apply_state(payload)
        elif topic == self.topics.status:
            self._apply_status(payload)
        elif topic == self.topics.command:
            # Our own outbound commands echo back through the wildcard subscription.
            self._logger.debug("[mirror] Ignoring command echo: %r", payload)
        else:
            self._logger.warning("[mirror] Unknown topic: %s", topic)

    def _apply_state(self, payload: bytes) -> None:
        try:
            state = DeskState.from_json(payload)
        except DecodeError as exc:
            self._logger.warning("[mirror] Failed to decode desk state: %s", exc)
            return
        if self.store.write_state(state):
            self._logger.info("[mirror] Desk state: %s mm (%s)", state.height_mm, state.position.wire_name)

    def _apply_status(self, payload: bytes) -> None:
        try:
            status = decode_status(payload)
        except DecodeError as exc:
            self._logger.warning("[mirror] Failed to decode desk status: %s", exc)
            return
        if self.store.write_status(status):
            self._logger.info("[mirror] Desk status: %s", status)
