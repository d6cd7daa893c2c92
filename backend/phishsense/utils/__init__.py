"""
PhishSense Utilities
"""

from .exceptions import (
    PhishSenseError,
    InputError,
    DetectorDegradedError,
    HeaderParsingError,
    StoreError,
    ConfigurationWarning,
)

__all__ = [
    'PhishSenseError',
    'InputError',
    'DetectorDegradedError',
    'HeaderParsingError',
    'StoreError',
    'ConfigurationWarning',
]
