# storefront/domain/errors.py


class StorefrontError(Exception):
    """Base for every error a service raises on purpose."""


class NotFoundError(StorefrontError):
    pass


class UnauthorizedError(StorefrontError):
    pass


class ConflictError(StorefrontError):
    pass


class ConcurrencyConflict(ConflictError):
    """Another request changed the same cart between our read and our write."""


class ValidationError(StorefrontError):
    pass


class InternalError(StorefrontError):
    pass
