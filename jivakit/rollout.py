"""Rollout status output and its raw serialisation."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

__all__ = ["RolloutOutput", "Rollout", "Serializer"]


@dataclass
class RolloutOutput:
    """Whether a deployment has rolled out, with a status message."""

    is_rolledout: bool = False
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form of the output."""
        return {"isRolledout": self.is_rolledout, "message": self.message}


Serializer = Callable[[RolloutOutput], bytes]


def _to_json(output: RolloutOutput) -> bytes:
    return json.dumps(
        output.to_dict(), separators=(",", ":"), ensure_ascii=False
    ).encode("utf-8")


class Rollout:
    """Renders a RolloutOutput in raw form."""

    def __init__(
        self,
        output: RolloutOutput | None = None,
        serializer: Serializer | None = None,
    ) -> None:
        self.output = output
        self.serializer: Serializer = serializer or _to_json

    def raw(self) -> bytes:
        """Return the serialised output; compact JSON unless told otherwise."""
        if self.output is None:
            raise ValueError("unable to get rollout status output")
        return self.serializer(self.output)