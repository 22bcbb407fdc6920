"""
Exceptions raised while evaluating vhost definitions.
"""


class VhostError(Exception):
    """Base exception for all nginx-vhost operations."""

    def __init__(self, message: str, *, exit_code: int = 1):
        super().__init__(message)
        self.exit_code = exit_code


class ConfigurationError(VhostError):
    """
    Vhost parameters are inconsistent.

    Raised before any resource is declared, so a failing definition
    leaves the system untouched.
    """
