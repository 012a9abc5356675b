"""Error types shared across LifeOS packages."""


class LifeOSError(Exception):
    """Base class for LifeOS errors."""


class UnauthorizedError(LifeOSError):
    """Actor is absent or does not own the resource."""


class NotFoundError(LifeOSError):
    """Referenced task, user or item does not exist."""


__all__ = ["LifeOSError", "NotFoundError", "UnauthorizedError"]
