"""MQTT client wrapper for the desk bridge."""

from __future__ import annotations

import logging
import ssl
import threading
from collections.abc import Callable
from typing import Any

import paho.mqtt.client as mqtt

from .config import MqttConfig, Topics
from .models import DeskCommand

MessageHandler = Callable[[Any, Any, Any], None]


def _is_mqtt_success(reason_code: Any) -> bool:
    try:
        if hasattr(reason_code, "is_failure"):
            return not reason_code.is_failure
        candidate = reason_code.value if hasattr(reason_code, "value") else reason_code
        return int(candidate) == 0
    except (TypeError, ValueError):
        return False


class BridgeMqtt:
    """Owns the paho client: one subscription to the desk topics and QoS 1 publishes.

    Reconnects are left to paho's network loop; this class only logs transport
    trouble and re-subscribes after every successful (re)connect.
    """

    def __init__(
        self,
        config: MqttConfig,
        topics: Topics,
        on_message: MessageHandler,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config
        self.topics = topics
        self._on_message = on_message
        self._logger = logger or logging.getLogger(__name__)
        self._client: mqtt.Client | None = None
        self._lock = threading.Lock()

    def connect(self) -> None:
        with self._lock:
            if self._client is not None:
                return
            callback_kwargs: dict[str, object] = {}
            if hasattr(mqtt, "CallbackAPIVersion"):
                callback_kwargs["callback_api_version"] = mqtt.CallbackAPIVersion.VERSION2
            client = mqtt.Client(
                client_id=self.config.client_id,
                clean_session=True,
                **callback_kwargs,
            )
            if self.config.username:
                client.username_pw_set(self.config.username, self.config.password or "")
            if self.config.tls_enabled:
                tls_kwargs: dict[str, object] = {}
                if self.config.ca_cert:
                    tls_kwargs["ca_certs"] = self.config.ca_cert
                if self.config.cert:
                    tls_kwargs["certfile"] = self.config.cert
                if self.config.key:
                    tls_kwargs["keyfile"] = self.config.key
                tls_kwargs["tls_version"] = getattr(ssl, "PROTOCOL_TLS_CLIENT", ssl.PROTOCOL_TLS)
                client.tls_set(**tls_kwargs)
            client.on_connect = self._handle_connect
            client.on_disconnect = self._handle_disconnect
            client.on_message = self._on_message
            self._logger.info("[mqtt] Connecting to MQTT broker %s:%s", self.config.host, self.config.port)
            # connect_async lets the network loop keep retrying when the broker is down at start-up
            client.connect_async(self.config.host, self.config.port, keepalive=self.config.keepalive)
            client.loop_start()
            self._client = client

    def disconnect(self) -> None:
        with self._lock:
            client = self._client
            self._client = None
        if client:
            client.disconnect()
            client.loop_stop()

    def is_connected(self) -> bool:
        client = self._client
        try:
            return bool(client and client.is_connected())
        except Exception:
            return False

    def publish(self, topic: str, payload: str, qos: int = 1, retain: bool = False) -> bool:
        client = self._client
        if not client:
            self._logger.warning("[mqtt] Dropping publish to %s; client not started", topic)
            return False
        try:
            info = client.publish(topic, payload=payload, qos=qos, retain=retain)
        except (OSError, ValueError) as exc:
            self._logger.warning("[mqtt] Failed to publish to %s: %s", topic, exc)
            return False
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            self._logger.warning("[mqtt] Publish to %s returned rc=%s", topic, info.rc)
            return False
        return True

    def publish_command(self, command: DeskCommand) -> bool:
        """Fire-and-forget a desk command; the effect is only seen via a later state message."""
        return self.publish(self.topics.command, command.to_json())

    def _handle_connect(self, client, _userdata, _flags, reason_code, properties=None):  # type: ignore[no-untyped-def]
        if not _is_mqtt_success(reason_code):
            self._logger.warning("[mqtt] Connection refused (reason=%s, properties=%s)", reason_code, properties)
            return
        self._logger.info("[mqtt] Connected; subscribing to %s", self.topics.subscription)
        result, _mid = client.subscribe(self.topics.subscription, qos=1)
        if result != mqtt.MQTT_ERR_SUCCESS:
            self._logger.warning("[mqtt] Failed to subscribe to %s (rc=%s)", self.topics.subscription, result)

    def _handle_disconnect(self, _client, _userdata, _flags, reason_code=None, _properties=None):  # type: ignore[no-untyped-def]
        if reason_code is not None and _is_mqtt_success(reason_code):
            self._logger.info("[mqtt] Disconnected from broker")
            return
        self._logger.warning("[mqtt] Disconnected from broker (reason=%s); waiting for reconnect", reason_code)
