"""HTTP client for the jiva controller REST API."""

from __future__ import annotations

import json
from typing import Any

import requests

__all__ = ["BadResponseError", "ControllerClient"]

_DEFAULT_TIMEOUT = 2.0


class BadResponseError(Exception):
    """Raised when the controller answers with a status of 300 or above."""

    def __init__(self, status_code: int, reason: str, body: str) -> None:
        super().__init__(f"Bad response: {status_code} {status_code} {reason}: {body}")
        self.status_code = status_code
        self.reason = reason
        self.body = body


class ControllerClient:
    """Talks JSON to a jiva controller at a given address."""

    def __init__(self, address: str, timeout: float = _DEFAULT_TIMEOUT) -> None:
        if not address.startswith("http"):
            address = "http://" + address
        if not address.endswith("/v1"):
            address += "/v1"
        self.address = address
        self.timeout = timeout

    def get(self, path: str) -> Any:
        """GET the path and return the decoded JSON body."""
        response = requests.get(self.address + path, timeout=self.timeout)
        with response:
            return response.json()

    def post(self, path: str, payload: Any = None) -> Any:
        """POST the payload as JSON and return the decoded reply, if any."""
        return self.do("POST", path, payload)

    def do(self, method: str, path: str, payload: Any = None) -> Any:
        """Send a JSON request and return the decoded reply, or None if empty.

        Paths that already start with ``http`` are used as they are.
        """
        url = path if path.startswith("http") else self.address + path
        response = requests.request(
            method,
            url,
            data=json.dumps(payload).encode(),
            headers={"Content-Type": "application/json"},
            timeout=self.timeout,
        )
        with response:
            if response.status_code >= 300:
                raise BadResponseError(
                    response.status_code, response.reason or "", response.text
                )
            if not response.content:
                return None
            return response.json()