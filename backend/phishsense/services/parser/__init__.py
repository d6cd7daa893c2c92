"""
PhishSense Parser Services
"""

from .header_parser import (
    ParsedHeaders,
    parse_header_block,
    extract_auth_results,
    count_received_hops,
    extract_address,
    find_suspicious_headers,
)

__all__ = [
    'ParsedHeaders',
    'parse_header_block',
    'extract_auth_results',
    'count_received_hops',
    'extract_address',
    'find_suspicious_headers',
]
