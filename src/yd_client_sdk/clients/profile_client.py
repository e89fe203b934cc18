from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from ..models_users import UserProfile
from ..exceptions import ProfileError
from .base import BaseClient

logger = logging.getLogger(__name__)


@dataclass
class ProfileClient(BaseClient):
    error_type = ProfileError

    def fetch_user_by_email(self, email: str) -> UserProfile:
        if not email:
            raise ValueError("email must not be empty")
        payload = self._authenticated_request("GET", "/user/", params={"email": email})
        return self._decode_user(payload)

    def fetch_current_user(self) -> UserProfile:
        if self.session is None:
            raise RuntimeError("ProfileClient requires a session to resolve the current user")
        return self.session.with_current_user_email(self.fetch_user_by_email)

    def update_user_profile(self, profile: UserProfile) -> UserProfile:
        if not profile.id:
            raise ValueError("profile.id must not be empty")
        payload = self._authenticated_request(
            "PUT",
            f"/user/{quote(profile.id, safe='')}",
            json_body=profile.to_payload(),
        )
        updated = self._decode_user(payload)
        logger.info("profile_updated", extra={"uid": updated.id})
        return updated

    def _decode_user(self, payload: Any) -> UserProfile:
        if isinstance(payload, dict) and isinstance(payload.get("user"), dict):
            payload = payload["user"]
        return self._decode(UserProfile, payload)
