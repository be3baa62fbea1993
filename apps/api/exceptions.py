"""Error taxonomy for the portal core"""


class PortalError(Exception):
    """Base class for errors raised by core operations"""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(PortalError):
    """Missing or invalid input, raised before any store call"""


class PersistenceError(PortalError):
    """The store rejected a call or could not be reached"""


class InvalidTransitionError(PortalError):
    """Appointment status change outside the allowed edges"""

    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot change appointment status from '{current}' to '{requested}'")
        self.current = current
        self.requested = requested


class NotFoundError(PortalError):
    """The row a mutation targets does not exist for this user"""
