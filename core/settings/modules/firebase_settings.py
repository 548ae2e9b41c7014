from __future__ import annotations

from typing import Optional

from pydantic import Field

from core.settings.base import StorefrontBaseSettings


class FirebaseSettings(StorefrontBaseSettings):
    """
    Firebase Admin credentials used to verify bearer tokens.
    Loaded from .env file with exact variable name matching.
    """

    project_id: Optional[str] = Field(default=None, alias="FIREBASE_ADMIN_PROJECT_ID")
    client_email: Optional[str] = Field(default=None, alias="FIREBASE_ADMIN_CLIENT_EMAIL")
    private_key: Optional[str] = Field(default=None, alias="FIREBASE_ADMIN_PRIVATE_KEY")

    @property
    def normalized_private_key(self) -> Optional[str]:
        # .env files usually carry the PEM with escaped newlines
        if self.private_key is None:
            return None
        return self.private_key.replace("\\n", "\n")
