"""
PhishSense Helper Functions

Utility functions used throughout the application.
"""

import re
import ipaddress
from datetime import datetime, timezone
from typing import Optional, List, Tuple, Iterator
from urllib.parse import urlparse

from .constants import SECOND_LEVEL_SUFFIXES


# ============================================================================
# Timestamps
# ============================================================================

def utc_now() -> datetime:
    """Get current UTC timestamp."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


# ============================================================================
# Patterns
# ============================================================================

URL_PATTERN = re.compile(r'https?://[^\s<>"\')]+', re.IGNORECASE)

EMAIL_PATTERN = re.compile(
    r'[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}',
    re.IGNORECASE
)

# Address inside angle brackets, any characters except whitespace and brackets
ANGLE_ADDRESS_PATTERN = re.compile(r'<\s*([^<>\s]+@[^<>\s]+)\s*>')


# ============================================================================
# Sender Parsing
# ============================================================================

def extract_email_parts(raw_from: str) -> Tuple[Optional[str], Optional[str], Optional[str]]:
    """
    Split a From value into display name, address and domain.

    Handles `"Name" <user@example.com>`, `Name <user@example.com>` and
    bare `user@example.com`. Addresses are lowercased; non-ASCII domains
    are kept as written so homoglyph checks can see them.

    Args:
        raw_from: Raw sender value

    Returns:
        (display_name, address, domain); missing parts are None
    """
    if not raw_from or not raw_from.strip():
        return None, None, None

    value = raw_from.strip()
    display_name: Optional[str] = None
    address: Optional[str] = None

    angle = ANGLE_ADDRESS_PATTERN.search(value)
    if angle:
        address = angle.group(1)
        name = value[:angle.start()].strip().strip('"').strip("'").strip()
        display_name = name or None
    elif '@' in value:
        # Bare address, possibly with stray whitespace or quotes
        candidates = [token.strip('"\'<>,;') for token in value.split() if '@' in token]
        address = candidates[0] if candidates else None
    else:
        display_name = value

    if not address or address.count('@') != 1:
        return display_name, None, None

    address = address.lower()
    domain = extract_domain_from_email(address)
    return display_name, address, domain


def extract_domain_from_email(email: str) -> Optional[str]:
    """Extract domain from email address."""
    if not email or '@' not in email:
        return None
    try:
        domain = email.rsplit('@', 1)[1].lower().strip().strip('[]').rstrip('.')
        return domain or None
    except IndexError:
        return None


def extract_domain_from_url(url: str) -> Optional[str]:
    """Extract domain from URL."""
    if not url:
        return None

    # Add scheme if missing
    if not url.lower().startswith(('http://', 'https://')):
        url = 'https://' + url

    try:
        parsed = urlparse(url)
        domain = (parsed.hostname or '').lower()
    except ValueError:
        return None

    if domain.startswith('www.'):
        domain = domain[4:]

    return domain or None


# ============================================================================
# Domain Utilities
# ============================================================================

def registrable_domain(domain: str) -> str:
    """
    Reduce a host to its registrable part.

    mail.paypal.com -> paypal.com, secure.example.co.uk -> example.co.uk
    """
    if not domain:
        return ""
    labels = domain.lower().strip('.').split('.')
    if len(labels) <= 2:
        return '.'.join(labels)
    last_two = '.'.join(labels[-2:])
    if last_two in SECOND_LEVEL_SUFFIXES:
        return '.'.join(labels[-3:])
    return last_two


def base_label(domain: str) -> str:
    """First label of the registrable domain (paypal for mail.paypal.com)."""
    registrable = registrable_domain(domain)
    return registrable.split('.')[0] if registrable else ""


def top_level_domain(domain: str) -> str:
    """Last label of a domain, without the dot."""
    if not domain or '.' not in domain:
        return ""
    return domain.lower().rstrip('.').rsplit('.', 1)[1]


def domain_matches(domain: str, candidates: List[str]) -> bool:
    """True if domain equals, or is a subdomain of, any candidate."""
    if not domain:
        return False
    domain = domain.lower()
    return any(domain == c or domain.endswith('.' + c) for c in candidates)


def is_ip_address(value: str) -> bool:
    """Check whether a host string is an IPv4/IPv6 literal."""
    if not value:
        return False
    try:
        ipaddress.ip_address(value.strip('[]'))
        return True
    except ValueError:
        return False


# ============================================================================
# Text Extraction
# ============================================================================

def iter_urls(text: str) -> Iterator[Tuple[str, int]]:
    """Yield (url, start offset) for every URL in text."""
    if not text:
        return
    for match in URL_PATTERN.finditer(text):
        yield match.group(0).rstrip('.,;:!?'), match.start()


def extract_urls(text: str) -> List[str]:
    """Extract all URLs from text."""
    return [url for url, _ in iter_urls(text)]


def extract_emails(text: str) -> List[str]:
    """Extract all email addresses from text."""
    if not text:
        return []
    return EMAIL_PATTERN.findall(text)


def strip_urls(text: str) -> str:
    """Replace URLs with spaces, keeping offsets stable."""
    if not text:
        return ""
    return URL_PATTERN.sub(lambda m: ' ' * len(m.group(0)), text)
