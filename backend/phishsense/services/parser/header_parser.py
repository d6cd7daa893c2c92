"""
PhishSense Header Parser

Permissive parsing of a raw RFC 5322 header block:
- Field splitting with folded continuation lines
- SPF/DKIM/DMARC extraction
- Received chain counting
- Header anomaly detection
"""

import re
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ...utils.constants import SUSPICIOUS_HEADERS
from ...utils.exceptions import HeaderParsingError

logger = logging.getLogger(__name__)

FIELD_PATTERN = re.compile(r'^([!-9;-~]+)[ \t]*:[ \t]*(.*)$')

SUSPICIOUS_MAILERS = ["phpmailer", "leaf", "the bat!", "mass mailer", "sendblaster"]
SUSPICIOUS_USER_AGENTS = ["php", "perl", "python", "spider", "bot", "crawler", "scraper", "harvest"]


@dataclass
class ParsedHeaders:
    """Header fields keyed by lowercase name, in order of appearance."""
    fields: Dict[str, List[str]] = field(default_factory=dict)
    skipped_lines: int = 0

    def get(self, name: str) -> Optional[str]:
        """First value of a field, or None."""
        values = self.fields.get(name.lower())
        return values[0] if values else None

    def get_all(self, name: str) -> List[str]:
        return list(self.fields.get(name.lower(), []))

    def __contains__(self, name: str) -> bool:
        return name.lower() in self.fields

    @property
    def names(self) -> List[str]:
        return list(self.fields)


def parse_header_block(raw_headers: str) -> ParsedHeaders:
    """
    Split a raw header block into fields.

    Lines that are neither a field nor a continuation are skipped. The
    block must yield at least one field.

    Args:
        raw_headers: Raw header text

    Returns:
        ParsedHeaders

    Raises:
        HeaderParsingError: Non-empty input with no recognizable field
    """
    parsed = ParsedHeaders()
    if not raw_headers or not raw_headers.strip():
        return parsed

    current_name: Optional[str] = None
    for line in raw_headers.replace('\r\n', '\n').split('\n'):
        if not line.strip():
            # Blank line ends the header section
            if parsed.fields:
                break
            continue

        if line[0] in ' \t' and current_name is not None:
            values = parsed.fields[current_name]
            values[-1] = f"{values[-1]} {line.strip()}".strip()
            continue

        match = FIELD_PATTERN.match(line)
        if not match:
            parsed.skipped_lines += 1
            current_name = None
            continue

        current_name = match.group(1).lower()
        parsed.fields.setdefault(current_name, []).append(match.group(2).strip())

    if not parsed.fields:
        raise HeaderParsingError("No header fields could be parsed")

    if parsed.skipped_lines:
        logger.debug(f"Skipped {parsed.skipped_lines} malformed header lines")

    return parsed


def extract_auth_results(headers: ParsedHeaders) -> Dict[str, Optional[str]]:
    """
    Extract SPF, DKIM, DMARC results from headers.

    Authentication-Results wins; Received-SPF and DKIM-Signature fill gaps.
    A mechanism with no evidence stays None.
    """
    results: Dict[str, Optional[str]] = {
        "spf": None,
        "dkim": None,
        "dmarc": None,
    }

    auth_values = headers.get_all("authentication-results")
    if auth_values:
        results.update(_parse_authentication_results_header(" ; ".join(auth_values)))

    if results["spf"] is None:
        received_spf = headers.get("received-spf")
        if received_spf:
            results["spf"] = _parse_received_spf(received_spf)

    if results["dkim"] is None and "dkim-signature" in headers:
        # Signature present but nobody recorded a verification result
        results["dkim"] = "present"

    return results


def _parse_authentication_results_header(header_value: str) -> Dict[str, Optional[str]]:
    """Parse Authentication-Results header value."""
    results = {}
    for mech in ("spf", "dkim", "dmarc"):
        # Pattern: mechanism=result
        match = re.search(rf'(?<![\w.-]){mech}=(\w+)', header_value, re.IGNORECASE)
        if match:
            results[mech] = match.group(1).lower()
    return results


def _parse_received_spf(header_value: str) -> Optional[str]:
    """Parse Received-SPF header: `pass (details...)`."""
    match = re.match(r'^(\w+)', header_value.strip())
    if match:
        return match.group(1).lower()
    return None


def count_received_hops(headers: ParsedHeaders) -> int:
    """Number of Received headers (relay hops)."""
    return len(headers.get_all("received"))


def extract_address(value: Optional[str]) -> Optional[str]:
    """Pull the bare address out of a From/Return-Path/Reply-To value."""
    if not value:
        return None
    match = re.search(r'<\s*([^<>\s]*)\s*>', value)
    candidate = match.group(1) if match else value.strip()
    if '@' not in candidate:
        return None
    return candidate.strip('"\' ').lower()


def find_suspicious_headers(headers: ParsedHeaders) -> List[str]:
    """Names of headers typical of compromised or scripted senders."""
    found = [name for name in SUSPICIOUS_HEADERS if name in headers]

    x_mailer = (headers.get("x-mailer") or "").lower()
    if x_mailer and any(m in x_mailer for m in SUSPICIOUS_MAILERS):
        found.append("x-mailer")

    user_agent = (headers.get("user-agent") or "").lower()
    if user_agent and any(a in user_agent for a in SUSPICIOUS_USER_AGENTS):
        found.append("user-agent")

    # "<>" is the null sender used by bounces
    return_path = headers.get("return-path")
    if return_path is not None and return_path.strip() != "<>" and "@" not in return_path:
        found.append("return-path")

    return found
