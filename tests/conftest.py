"""Shared test fixtures for the sven desk bridge test suite.

This module provides reusable fixtures for:
- Logger mocking
- MQTT / topic configuration objects
- Night-mode and presence configuration
- A fresh state store
"""

from __future__ import annotations

import logging
from unittest.mock import Mock

import pytest
from sven.config import MqttConfig, NightModeConfig, PresenceConfig, Topics
from sven.state import DeskStateStore

# ============================================================================
# Logging Fixtures
# ============================================================================


@pytest.fixture
def mock_logger():
    """Create a mock logger for testing.

    Returns a Mock with spec=logging.Logger to ensure only valid
    logger methods can be called.
    """
    return Mock(spec=logging.Logger)


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def topics():
    """Default desk topics under ``sven/``."""
    return Topics.from_base("sven")


@pytest.fixture
def mqtt_config():
    """Basic MQTT configuration for testing."""
    return MqttConfig(
        host="localhost",
        port=1883,
        username=None,
        password=None,
        tls_enabled=False,
        cert=None,
        key=None,
        ca_cert=None,
        client_id="sven-client",
        keepalive=5,
    )


@pytest.fixture
def night_config():
    """Night window 23:00-06:00, threshold 845 mm, target 850 mm, 60 s polling."""
    return NightModeConfig(
        enabled=True,
        start_hour=23,
        end_hour=6,
        threshold_mm=845,
        night_height_mm=850,
        poll_interval_seconds=60.0,
    )


@pytest.fixture
def presence_config():
    return PresenceConfig(host="192.168.1.132", timeout_seconds=1.0)


# ============================================================================
# State Fixtures
# ============================================================================


@pytest.fixture
def store():
    """A store at the start-up baseline (unknown height, offline)."""
    return DeskStateStore()
