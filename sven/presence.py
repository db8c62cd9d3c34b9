"""Presence detection by pinging a machine that is only awake while someone uses it."""

from __future__ import annotations

import logging
import math
import subprocess

from .config import PresenceConfig


class PresenceProbe:
    def __init__(self, config: PresenceConfig, logger: logging.Logger | None = None) -> None:
        self.config = config
        self._logger = logger or logging.getLogger(__name__)

    def build_command(self) -> list[str]:
        # ping -W takes whole seconds
        wait = max(1, math.ceil(self.config.timeout_seconds))
        return ["ping", "-c", "1", "-W", str(wait), str(self.config.host)]

    def is_present(self) -> bool:
        """Send one echo request; any failure counts as nobody present.

        Blocks for at most the configured timeout plus one second.
        """
        if not self.config.host:
            return False
        command = self.build_command()
        try:
            result = subprocess.run(
                command,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=self.config.timeout_seconds + 1,
                check=False,
            )
        except subprocess.TimeoutExpired:
            self._logger.debug("[presence] ping %s timed out", self.config.host)
            return False
        except FileNotFoundError as exc:
            self._logger.warning("[presence] ping command not found: %s", exc)
            return False
        except OSError as exc:
            self._logger.warning("[presence] Failed to execute ping: %s", exc)
            return False
        present = result.returncode == 0
        self._logger.debug("[presence] %s is %s", self.config.host, "reachable" if present else "unreachable")
        return present
