"""
Domain exceptions.

HTTP mapping lives in api.main; the domain only names what went wrong.
"""


class StorefrontError(Exception):
    """Base class for all service errors."""


# Authentication -------------------------------------------------------------

class AuthenticationError(StorefrontError):
    """Missing or invalid bearer token / operational secret."""


class InvalidSignatureError(AuthenticationError):
    """Webhook body does not match its signature."""


# Validation -----------------------------------------------------------------

class ValidationError(StorefrontError, ValueError):
    """Request is missing required fields or carries bad values."""


# Not found ------------------------------------------------------------------

class NotFoundError(StorefrontError):
    """Entity is absent or not owned by the caller."""


class OrderNotFoundError(NotFoundError):
    pass


class UserNotFoundError(NotFoundError):
    pass


class AddressNotFoundError(NotFoundError):
    pass


# Upstream -------------------------------------------------------------------

class UpstreamError(StorefrontError):
    """A collaborator (datastore, payment gateway, content mirror) failed."""


class PaymentGatewayError(UpstreamError):
    pass


class ContentMirrorError(UpstreamError):
    pass
