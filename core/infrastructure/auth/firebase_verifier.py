"""
Firebase Token Verifier Implementation.

Verifies Firebase ID tokens with firebase-admin. The SDK is blocking, so
verification runs in a worker thread.
"""
import asyncio
import logging
from typing import Optional

import firebase_admin
from firebase_admin import auth, credentials
from firebase_admin.exceptions import FirebaseError

from core.application.interfaces import AuthenticatedPrincipal, ITokenVerifier
from core.domain.exceptions import AuthenticationError
from core.settings.modules.firebase_settings import FirebaseSettings


logger = logging.getLogger(__name__)

APP_NAME = "storefront"


class FirebaseTokenVerifier(ITokenVerifier):
    """Firebase Admin implementation of the token verifier."""

    def __init__(self, settings: FirebaseSettings):
        self.settings = settings
        self._app: Optional[firebase_admin.App] = None

    def _get_app(self) -> firebase_admin.App:
        if self._app is not None:
            return self._app
        try:
            self._app = firebase_admin.get_app(APP_NAME)
        except ValueError:
            if self.settings.client_email and self.settings.normalized_private_key:
                credential = credentials.Certificate(
                    {
                        "type": "service_account",
                        "project_id": self.settings.project_id,
                        "client_email": self.settings.client_email,
                        "private_key": self.settings.normalized_private_key,
                        "token_uri": "https://oauth2.googleapis.com/token",
                    }
                )
            else:
                logger.warning("Firebase service account not configured, using default credentials")
                credential = None
            options = {"projectId": self.settings.project_id} if self.settings.project_id else None
            self._app = firebase_admin.initialize_app(credential, options, name=APP_NAME)
            logger.info("✅ Firebase Admin initialized")
        return self._app

    async def verify(self, token: str) -> AuthenticatedPrincipal:
        if not token:
            raise AuthenticationError("Unauthorized")
        try:
            app = self._get_app()
            decoded = await asyncio.to_thread(auth.verify_id_token, token, app)
        except (ValueError, FirebaseError) as e:
            logger.warning(f"Token verification failed: {e}")
            raise AuthenticationError("Unauthorized") from e

        return AuthenticatedPrincipal(
            uid=decoded["uid"],
            email=decoded.get("email"),
            name=decoded.get("name"),
        )
