"""Content mirror adapters."""
from .sanity_client import SanityContentMirror, to_wire
from .signature import compute_signature, verify_mirror_signature

__all__ = [
    "SanityContentMirror",
    "compute_signature",
    "to_wire",
    "verify_mirror_signature",
]
