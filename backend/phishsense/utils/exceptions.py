"""
PhishSense Custom Exceptions

Centralized exception classes for error handling.
"""


class PhishSenseError(Exception):
    """Base exception for all PhishSense errors."""
    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


# ============================================================================
# Input Exceptions
# ============================================================================

class InputError(PhishSenseError):
    """Email input is absent or malformed beyond repair."""
    pass


# ============================================================================
# Detection Exceptions
# ============================================================================

class DetectorDegradedError(PhishSenseError):
    """A detector could not extract its signal."""
    def __init__(self, message: str = "Detector unavailable", reason: str = "degraded"):
        self.reason = reason
        super().__init__(message)


class HeaderParsingError(DetectorDegradedError):
    """Raw header block could not be parsed."""
    def __init__(self, message: str = "Unable to parse headers"):
        super().__init__(message, reason="unparsable-headers")


# ============================================================================
# Store Exceptions
# ============================================================================

class StoreError(PhishSenseError):
    """Trust or pattern store could not serve a lookup."""
    pass


# ============================================================================
# Configuration Warnings
# ============================================================================

class ConfigurationWarning(UserWarning):
    """Pattern or brand tables are empty or partially loaded."""
    pass
