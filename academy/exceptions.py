"""
Platform errors raised by the service helpers in academy.utils
Views translate these into error pages, flash messages or JSON status codes.
"""


class PlatformError(Exception):
    """Base class for every error the service layer raises on purpose"""
    status_code = 500


class NotFound(PlatformError):
    status_code = 404


class ValidationError(PlatformError):
    status_code = 400


class LastAdminError(PlatformError):
    """Raised when an action would leave the platform without an admin"""
    status_code = 400


class APIClientError(PlatformError):
    """HTTP call to the platform API failed"""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code
