"""
Custom Exception Classes

Defines application-specific exceptions for better error handling and logging.
"""

from typing import Any, Dict, Optional


class RelayException(Exception):
    """Base exception for all relay errors"""

    def __init__(
        self,
        message: str,
        error_code: str = "RELAY_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/API responses"""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(RelayException):
    """Data validation errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="VALIDATION_ERROR", details=details)


class PayloadValidationException(ValidationException):
    """Incoming webhook payload is missing or malformed"""

    def __init__(
        self,
        message: str = "Invalid payload",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details=details)


class ConfigurationException(RelayException):
    """Configuration or environment errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="CONFIG_ERROR", details=details)
