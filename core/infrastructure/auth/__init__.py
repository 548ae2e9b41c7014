"""Authentication adapters."""
from .firebase_verifier import FirebaseTokenVerifier

__all__ = ["FirebaseTokenVerifier"]
