"""
Error taxonomy for the credential layer
"""

from typing import Optional


class RestServerException(Exception):
    """Base exception for the rest server"""
    pass


class ConfigValidationError(RestServerException):
    """Raised when startup configuration is missing or malformed"""
    pass


class BootstrapError(RestServerException):
    """Raised when the storage namespace or default admin cannot be created"""
    pass


class InvalidUsernameError(RestServerException):
    """Raised when a username cannot be used as a key path segment"""

    def __init__(self, username: Optional[str], reason: str = "invalid username"):
        self.username = username
        super().__init__(f"{reason}: {username!r}")


class UserNotFoundError(RestServerException):
    """Raised when an operation targets a user that does not exist"""

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"user does not exist: {username}")


class RemoteStoreError(RestServerException):
    """Raised when the key-value store rejects a call or cannot be reached"""

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)
