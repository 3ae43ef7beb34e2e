"""Service-level error taxonomy translated to HTTP errors by routers."""


class MessagingError(RuntimeError):
    """Base class for messaging service failures."""


class InvalidInputError(MessagingError):
    """Raised for empty content, self-addressed messages or missing identifiers."""


class NotFoundError(MessagingError):
    """Raised when an explicitly referenced record does not exist."""


class AuthorizationError(MessagingError):
    """Raised when the principal may not perform an action."""
