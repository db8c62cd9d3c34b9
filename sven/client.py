"""Synchronous httpx client for the desk bridge HTTP gateway."""

from __future__ import annotations

from typing import Any

import httpx

from .config import DEFAULT_TOPIC_BASE
from .models import CommandKind, DecodeError, DeskCommand, DeskState


class GatewayError(RuntimeError):
    """Gateway request failed or returned an error status."""


class GatewayClient:
    def __init__(
        self,
        base_url: str,
        *,
        topic_base: str = DEFAULT_TOPIC_BASE,
        timeout: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.topic_base = topic_base.strip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> GatewayClient:
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def send_command(self, kind: CommandKind | str, value: int) -> dict[str, Any]:
        if not isinstance(kind, CommandKind):
            try:
                kind = CommandKind.from_wire(kind)
            except DecodeError as exc:
                raise GatewayError(str(exc)) from exc
        try:
            command = DeskCommand(kind, value)
        except DecodeError as exc:
            raise GatewayError(str(exc)) from exc
        return self._request("POST", "command", content=command.to_json())

    def get_state(self) -> DeskState:
        payload = self._request("GET", "state")
        try:
            return DeskState.from_dict(payload)
        except (DecodeError, TypeError, AttributeError) as exc:
            raise GatewayError(f"Unexpected state payload: {payload!r}") from exc

    def get_status(self) -> str:
        payload = self._request("GET", "status")
        if not isinstance(payload, str):
            raise GatewayError(f"Unexpected status payload: {payload!r}")
        return payload

    def _request(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        path = f"/api/{self.topic_base}/{endpoint}"
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.RequestError as exc:
            raise GatewayError(f"Failed to contact gateway: {exc}") from exc
        if response.status_code >= 400:
            raise GatewayError(f"Gateway error {response.status_code}: {response.text}")
        try:
            return response.json()
        except ValueError as exc:
            raise GatewayError(f"Gateway returned invalid JSON: {response.text!r}") from exc
