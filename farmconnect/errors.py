"""Error types raised by the FarmConnect data layer.

Every error carries the HTTP status the API answers with, so route handlers
can let them propagate to the handler registered in ``create_app``.
"""


class MarketplaceError(Exception):
    """Base class for failures scoped to a single marketplace operation."""
    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'error': self.message, 'kind': type(self).__name__}


class NotFound(MarketplaceError):
    """Requested entity id is absent."""
    status_code = 404


class InvalidInput(MarketplaceError):
    """Caller supplied data the operation cannot accept."""
    status_code = 400


class InvalidTransition(InvalidInput):
    """Order status change not allowed from the current status."""

    def __init__(self, current, requested):
        super().__init__(f'Cannot move order from {current} to {requested}')
        self.current = current
        self.requested = requested


class Unauthorized(MarketplaceError):
    """Actor is not allowed to perform the operation."""
    status_code = 403


class PersistenceFailure(MarketplaceError):
    """Reading or writing the store failed."""
    status_code = 500


class StaleSnapshot(PersistenceFailure):
    """Store changed between load and save."""
    status_code = 409
