"""
Sven desk bridge

Mirrors the state of a motorized "sven" desk from MQTT into memory, relays
commands from a small HTTP gateway onto the bus, and runs a night-mode policy
that parks the desk at its night height when nobody is around.

Core modules:
- models: Desk state, position and command types with their JSON codecs
- state: Thread-safe store for the last known desk state and status
- mirror: Routes inbound MQTT messages into the store
- night_mode: Background policy loop for unattended night positioning
- presence: Ping-based presence probe
- gateway: HTTP interface for commands and state reads
- client: httpx client for the HTTP gateway
"""

__version__ = "0.3.0"
