"""Success envelope helpers shared by every blueprint."""

from __future__ import annotations

from typing import Any

from flask import Response, jsonify


def success(
    data: Any = None,
    *,
    message: str | None = None,
    status_code: int = 200,
    pagination: dict[str, int] | None = None,
) -> tuple[Response, int]:
    """
    Build the uniform ``{"success": true, ...}`` JSON response.

    Keys whose value is ``None`` are left out so that, for example, a
    logout acknowledgment carries only ``success`` and ``message``.
    """
    body: dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = data
    if message is not None:
        body["message"] = message
    if pagination is not None:
        body["pagination"] = pagination
    return jsonify(body), status_code
