"""
Profile endpoints for the authenticated account.

Endpoints:
    GET   /profile  -- Return the caller's profile.
    PATCH /profile  -- Update firstName, lastName and/or profileImage.
"""

from __future__ import annotations

from flask import Blueprint, Response

from ..auth import require_auth
from ..responses import success
from ..services import accounts
from ..tokens import Claims
from . import json_body

profile_bp = Blueprint("profile", __name__)


@profile_bp.route("", methods=["GET"])
@require_auth
def get_profile(identity: Claims) -> tuple[Response, int]:
    return success(accounts.get_profile(identity))


@profile_bp.route("", methods=["PATCH"])
@require_auth
def update_profile(identity: Claims) -> tuple[Response, int]:
    profile = accounts.update_profile(identity, json_body())
    return success(profile, message="Profile updated successfully")
