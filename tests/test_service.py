"""Tests for sven.service — wiring of the bridge components."""

from __future__ import annotations

from unittest.mock import patch

from sven.config import BridgeConfig
from sven.models import CommandKind, DeskCommand
from sven.service import DeskBridge


def test_components_share_one_store():
    bridge = DeskBridge(BridgeConfig.from_env({}))
    assert bridge.mirror.store is bridge.store
    assert bridge.night_mode.store is bridge.store
    assert bridge.gateway.store is bridge.store


def test_mqtt_messages_feed_the_mirror():
    bridge = DeskBridge(BridgeConfig.from_env({}))
    assert bridge.mqtt._on_message == bridge.mirror.on_message


def test_gateway_and_policy_publish_through_mqtt():
    bridge = DeskBridge(BridgeConfig.from_env({}))
    command = DeskCommand(CommandKind.ABSOLUTE_HEIGHT, 850)
    with patch.object(bridge.mqtt, "publish", return_value=True) as mock_publish:
        bridge.gateway.submit_command(command)
        bridge.night_mode._publish(command)
    assert mock_publish.call_count == 2
    assert all(call.args[0] == "sven/command" for call in mock_publish.call_args_list)


def test_start_and_stop_order():
    bridge = DeskBridge(BridgeConfig.from_env({}))
    with (
        patch.object(bridge.mqtt, "connect") as connect,
        patch.object(bridge.night_mode, "start") as night_start,
        patch.object(bridge.gateway, "start") as gateway_start,
        patch.object(bridge.mqtt, "disconnect") as disconnect,
        patch.object(bridge.night_mode, "stop") as night_stop,
        patch.object(bridge.gateway, "stop") as gateway_stop,
    ):
        bridge.start()
        bridge.stop()
    connect.assert_called_once()
    night_start.assert_called_once()
    gateway_start.assert_called_once()
    gateway_stop.assert_called_once()
    night_stop.assert_called_once()
    disconnect.assert_called_once()
