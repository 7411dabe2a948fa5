"""Liveness / readiness probe."""

from __future__ import annotations

import os

from flask import Blueprint, Response

from ..responses import success

health_bp = Blueprint("health", __name__)


@health_bp.route("/health", methods=["GET"])
def health_check() -> tuple[Response, int]:
    """
    Report that the service is up.

    Public: load balancers and container health-checks poll it without a
    token.
    """
    return success(
        {
            "status": "healthy",
            "service": "taskhub",
            "environment": os.getenv("ENVIRONMENT", "unknown"),
        }
    )
