"""Configuration helpers for the sven desk bridge."""

from __future__ import annotations

import os
from dataclasses import dataclass

from sven.utils import clamp_int, parse_bool, parse_float, parse_int, split_csv

DEFAULT_TOPIC_BASE = "sven"
DEFAULT_CLIENT_ID = "sven-client"
DEFAULT_PRESENCE_HOST = "192.168.1.132"


def _strip_or_none(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


@dataclass(frozen=True)
class MqttConfig:
    host: str
    port: int
    username: str | None
    password: str | None
    tls_enabled: bool
    cert: str | None
    key: str | None
    ca_cert: str | None
    client_id: str
    keepalive: int


@dataclass(frozen=True)
class Topics:
    base: str
    command: str
    state: str
    status: str

    @property
    def subscription(self) -> str:
        return f"{self.base}/#"

    @staticmethod
    def from_base(base: str) -> Topics:
        base = base.rstrip("/") or DEFAULT_TOPIC_BASE
        return Topics(
            base=base,
            command=f"{base}/command",
            state=f"{base}/state",
            status=f"{base}/status",
        )


@dataclass(frozen=True)
class GatewayConfig:
    bind_address: str
    port: int
    allowed_origins: tuple[str, ...] = ("*",)


@dataclass(frozen=True)
class PresenceConfig:
    host: str | None
    timeout_seconds: float


@dataclass(frozen=True)
class NightModeConfig:
    enabled: bool
    start_hour: int
    end_hour: int
    threshold_mm: int
    night_height_mm: int
    poll_interval_seconds: float


@dataclass(frozen=True)
class BridgeConfig:
    mqtt: MqttConfig
    topics: Topics
    gateway: GatewayConfig
    presence: PresenceConfig
    night_mode: NightModeConfig

    @staticmethod
    def from_env(env: dict[str, str] | None = None) -> BridgeConfig:
        source = env if env is not None else os.environ

        mqtt = MqttConfig(
            host=_strip_or_none(source.get("MQTT_HOST")) or "localhost",
            port=parse_int(source.get("MQTT_PORT"), 1883),
            username=_strip_or_none(source.get("MQTT_USER") or source.get("MQTT_USERNAME")),
            password=_strip_or_none(source.get("MQTT_PASS") or source.get("MQTT_PASSWORD")),
            tls_enabled=parse_bool(source.get("MQTT_TLS_ENABLED"), False),
            cert=_strip_or_none(source.get("MQTT_CERT")),
            key=_strip_or_none(source.get("MQTT_KEY")),
            ca_cert=_strip_or_none(source.get("MQTT_CA_CERT")),
            client_id=_strip_or_none(source.get("SVEN_MQTT_CLIENT_ID")) or DEFAULT_CLIENT_ID,
            keepalive=max(1, parse_int(source.get("SVEN_MQTT_KEEPALIVE"), 5)),
        )

        topics = Topics.from_base(_strip_or_none(source.get("SVEN_TOPIC_BASE")) or DEFAULT_TOPIC_BASE)

        gateway = GatewayConfig(
            bind_address=_strip_or_none(source.get("SVEN_HTTP_BIND")) or "0.0.0.0",
            port=parse_int(source.get("SVEN_HTTP_PORT"), 3001),
            allowed_origins=tuple(split_csv(source.get("SVEN_HTTP_ALLOWED_ORIGINS"))) or ("*",),
        )

        # An explicitly empty host disables the probe; an unset one uses the default.
        raw_presence_host = source.get("SVEN_PRESENCE_HOST")
        presence_host = DEFAULT_PRESENCE_HOST if raw_presence_host is None else _strip_or_none(raw_presence_host)
        presence = PresenceConfig(
            host=presence_host,
            timeout_seconds=max(0.1, parse_float(source.get("SVEN_PRESENCE_TIMEOUT_SECONDS"), 1.0)),
        )

        night_mode = NightModeConfig(
            enabled=parse_bool(source.get("SVEN_NIGHT_MODE_ENABLED"), True),
            start_hour=clamp_int(parse_int(source.get("SVEN_NIGHT_START_HOUR"), 23), 0, 23),
            end_hour=clamp_int(parse_int(source.get("SVEN_NIGHT_END_HOUR"), 6), 0, 23),
            threshold_mm=max(0, parse_int(source.get("SVEN_NIGHT_THRESHOLD_MM"), 845)),
            night_height_mm=max(0, parse_int(source.get("SVEN_NIGHT_HEIGHT_MM"), 850)),
            poll_interval_seconds=max(1.0, parse_float(source.get("SVEN_NIGHT_POLL_SECONDS"), 60.0)),
        )

        return BridgeConfig(
            mqtt=mqtt,
            topics=topics,
            gateway=gateway,
            presence=presence,
            night_mode=night_mode,
        )
