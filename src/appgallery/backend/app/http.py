"""JSON response helpers for the gallery API blueprints.

Errors use the management API's ``{"success": false, "error": ...}`` body.
Every helper marks the response ``no-store``: catalog edits must be visible
on the very next read.
"""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Mapping

from flask import jsonify

NO_STORE_HEADERS: Mapping[str, str] = {"Cache-Control": "no-store"}

JsonResponse = tuple[Any, int, dict[str, str]]


def uncached_json(payload: Any, status: int = HTTPStatus.OK) -> JsonResponse:
    """``jsonify`` ``payload`` with caching disabled."""

    return jsonify(payload), int(status), dict(NO_STORE_HEADERS)


@dataclass(frozen=True)
class ProblemResponse:
    """Machine-readable error code plus an optional human message."""

    error: str
    status: int
    message: str | None = None
    extra: Mapping[str, Any] | None = None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"success": False, "error": self.error}
        if self.message:
            payload["message"] = self.message
        if self.extra:
            payload.update(self.extra)
        return payload

    def to_response(self) -> JsonResponse:
        return uncached_json(self.as_dict(), self.status)


def problem_response(
    error: str,
    *,
    status: int,
    message: str | None = None,
    **extra: Any,
) -> ProblemResponse:
    additional: Mapping[str, Any] | None = extra or None
    return ProblemResponse(error=error, status=status, message=message, extra=additional)


__all__ = [
    "JsonResponse",
    "NO_STORE_HEADERS",
    "ProblemResponse",
    "problem_response",
    "uncached_json",
]
