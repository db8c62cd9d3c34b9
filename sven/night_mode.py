"""
Night-mode policy loop

Moves the desk to its night height when the desk is unattended at night.
Each cycle runs four guards in order, and the first one that fires decides
how long to sleep before the next cycle:

1. Already in position: the known height is at or past the threshold.
2. Outside the night window: sleep exactly until the window next opens.
3. Someone present: the presence probe answered, leave the desk alone.
4. Trigger: publish one AbsoluteHeight command for the night height.

The loop is level-triggered. It keeps publishing the same command every cycle
until the mirrored height shows the desk has arrived. Repeating "go to height
X" is safe because it converges at the device. The loop never writes desk
state itself.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum

from .config import NightModeConfig
from .models import CommandKind, DeskCommand, DeskState
from .presence import PresenceProbe
from .state import DeskStateStore

CommandPublisher = Callable[[DeskCommand], object]
Clock = Callable[[], datetime]


def _local_now() -> datetime:
    # Naive wall-clock time; converting it to an instant goes through the host's local zone rules.
    return datetime.now()


class NightModeOutcome(Enum):
    ALREADY_IN_POSITION = "already_in_position"
    OUTSIDE_WINDOW = "outside_window"
    PRESENT = "present"
    TRIGGER = "trigger"


@dataclass(frozen=True)
class NightModeDecision:
    outcome: NightModeOutcome
    sleep_seconds: float


def in_night_window(hour: int, start_hour: int, end_hour: int) -> bool:
    """Half-open ``[start_hour, end_hour)``, wrapping past midnight when start > end."""
    if start_hour == end_hour:
        return False
    if start_hour < end_hour:
        return start_hour <= hour < end_hour
    return hour >= start_hour or hour < end_hour


def seconds_until_window_start(now: datetime, start_hour: int) -> float:
    """Seconds from ``now`` until the next wall-clock ``start_hour:00:00``.

    Naive times are read as host local time and aware times in their own zone.
    Both ends are compared as UTC instants, so a DST change in between is counted.
    """
    candidate = now.replace(hour=start_hour, minute=0, second=0, microsecond=0)
    if candidate <= now:
        candidate += timedelta(days=1)
    delta = candidate.astimezone(timezone.utc) - now.astimezone(timezone.utc)
    return max(1.0, delta.total_seconds())


class NightModePolicy:
    def __init__(
        self,
        store: DeskStateStore,
        probe: PresenceProbe,
        publish: CommandPublisher,
        config: NightModeConfig,
        *,
        clock: Clock = _local_now,
        logger: logging.Logger | None = None,
    ) -> None:
        self.store = store
        self.probe = probe
        self.config = config
        self._publish = publish
        self._clock = clock
        self._logger = logger or logging.getLogger(__name__)
        self._thread: threading.Thread | None = None
        self._thread_lock = threading.Lock()
        self._stop_event = threading.Event()

    @property
    def night_command(self) -> DeskCommand:
        return DeskCommand(CommandKind.ABSOLUTE_HEIGHT, self.config.night_height_mm)

    def evaluate(self, state: DeskState, now: datetime) -> NightModeDecision:
        poll = self.config.poll_interval_seconds
        # An unknown height (0) never counts as already in position.
        if state.height_known and state.height_mm >= self.config.threshold_mm:
            return NightModeDecision(NightModeOutcome.ALREADY_IN_POSITION, poll)
        if not in_night_window(now.hour, self.config.start_hour, self.config.end_hour):
            wait = seconds_until_window_start(now, self.config.start_hour)
            return NightModeDecision(NightModeOutcome.OUTSIDE_WINDOW, wait)
        if self.probe.is_present():
            return NightModeDecision(NightModeOutcome.PRESENT, poll)
        return NightModeDecision(NightModeOutcome.TRIGGER, poll)

    def run_cycle(self) -> float:
        """Run one decision cycle and return how long to sleep before the next."""
        state = self.store.read_state()
        decision = self.evaluate(state, self._clock())
        outcome = decision.outcome
        if outcome is NightModeOutcome.ALREADY_IN_POSITION:
            self._logger.debug("[night-mode] Current height is %s mm; already in night mode", state.height_mm)
        elif outcome is NightModeOutcome.OUTSIDE_WINDOW:
            self._logger.info(
                "[night-mode] Not night time; waiting %d seconds for the window to open",
                int(decision.sleep_seconds),
            )
        elif outcome is NightModeOutcome.PRESENT:
            self._logger.info("[night-mode] Presence host is active; leaving the desk alone")
        else:
            command = self.night_command
            self._logger.info(
                "[night-mode] Night time and height is %s mm; sending %s",
                state.height_mm,
                command,
            )
            self._publish(command)
        return decision.sleep_seconds

    def start(self) -> None:
        if not self.config.enabled:
            self._logger.info("[night-mode] Disabled by configuration")
            return
        with self._thread_lock:
            if self._thread and self._thread.is_alive():
                return
            self._stop_event.clear()
            thread = threading.Thread(target=self._run, name="sven-night-mode", daemon=True)
            self._thread = thread
            thread.start()
        self._logger.info(
            "[night-mode] Started (window %02d:00-%02d:00, threshold %s mm, target %s mm)",
            self.config.start_hour,
            self.config.end_hour,
            self.config.threshold_mm,
            self.config.night_height_mm,
        )

    def stop(self, timeout: float = 5.0) -> None:
        with self._thread_lock:
            thread = self._thread
            self._thread = None
            self._stop_event.set()
        if thread:
            thread.join(timeout=timeout)

    def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                delay = self.run_cycle()
            except Exception as exc:  # pylint: disable=broad-except
                self._logger.error("[night-mode] Cycle failed: %s", exc, exc_info=True)
                delay = self.config.poll_interval_seconds
            if self._stop_event.wait(delay):
                break
