"""Wire the desk bridge together and run it until signalled."""

from __future__ import annotations

import argparse
import logging
import signal
import threading

from .config import BridgeConfig
from .gateway import CommandGateway
from .mirror import BusMirror
from .mqtt import BridgeMqtt
from .night_mode import NightModePolicy
from .presence import PresenceProbe
from .state import DeskStateStore

LOGGER = logging.getLogger("sven-bridge")


class DeskBridge:
    """Three long-running activities around one shared store.

    The paho network thread feeds the mirror, the night-mode thread polls the
    store, and the HTTP gateway serves requests. They only meet in the store.
    """

    def __init__(self, config: BridgeConfig) -> None:
        self.config = config
        self.store = DeskStateStore()
        self.mirror = BusMirror(self.store, config.topics, logger=logging.getLogger("sven.mirror"))
        self.mqtt = BridgeMqtt(
            config.mqtt,
            config.topics,
            on_message=self.mirror.on_message,
            logger=logging.getLogger("sven.mqtt"),
        )
        self.probe = PresenceProbe(config.presence, logger=logging.getLogger("sven.presence"))
        self.night_mode = NightModePolicy(
            self.store,
            self.probe,
            self.mqtt.publish_command,
            config.night_mode,
            logger=logging.getLogger("sven.night_mode"),
        )
        self.gateway = CommandGateway(
            store=self.store,
            publish=self.mqtt.publish_command,
            topics=config.topics,
            config=config.gateway,
            logger=logging.getLogger("sven.gateway"),
        )

    def start(self) -> None:
        self.mqtt.connect()
        self.night_mode.start()
        self.gateway.start()
        LOGGER.info("Desk bridge ready (topics under %s/)", self.config.topics.base)

    def stop(self) -> None:
        self.gateway.stop()
        self.night_mode.stop()
        self.mqtt.disconnect()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Bridge HTTP commands to the sven desk over MQTT")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = BridgeConfig.from_env()
    bridge = DeskBridge(config)
    stop_event = threading.Event()

    def _handle_signal(signum: int, _frame) -> None:  # type: ignore[no-untyped-def]
        LOGGER.info("Received signal %s, shutting down", signum)
        stop_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        signal.signal(sig, _handle_signal)

    bridge.start()
    try:
        stop_event.wait()
    finally:
        bridge.stop()
