"""
PhishSense Lookalike Domain Matching

Detects domain impersonation using:
- Damerau-Levenshtein (optimal string alignment) edit distance
- Homoglyph/Unicode confusable and digit substitution normalization
- Brand names embedded in otherwise unrelated domains
"""

import re
import logging
import unicodedata
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ...config.scoring import ReputationScoring
from ...utils.helpers import registrable_domain, domain_matches
from ..stores.patterns import BrandProfile

logger = logging.getLogger(__name__)


# =============================================================================
# HOMOGLYPH / CONFUSABLE CHARACTER MAPPINGS
# =============================================================================
# Characters that look similar to ASCII letters

HOMOGLYPHS = {
    'a': ['а', 'ɑ', 'α', 'ａ'],  # Cyrillic а, Greek alpha
    'b': ['Ь', 'ь', 'ｂ'],
    'c': ['с', 'ϲ', 'ᴄ', 'ｃ'],  # Cyrillic с
    'd': ['ԁ', 'ｄ'],
    'e': ['е', 'ё', 'ε', 'ｅ'],  # Cyrillic е
    'g': ['ɡ', 'ց', 'ｇ'],
    'h': ['һ', 'ｈ'],
    'i': ['і', 'ι', 'ɪ', 'ｉ'],  # Cyrillic і, Greek iota
    'j': ['ј', 'ｊ'],
    'k': ['κ', 'ｋ'],
    'l': ['ⅼ', 'ｌ', 'ı'],
    'm': ['м', 'ｍ'],
    'n': ['п', 'ո', 'ｎ'],
    'o': ['о', 'ο', 'ｏ'],  # Cyrillic о, Greek omicron
    'p': ['р', 'ρ', 'ｐ'],  # Cyrillic р, Greek rho
    'q': ['ԛ', 'ｑ'],
    'r': ['г', 'ｒ'],
    's': ['ѕ', 'ｓ'],
    't': ['т', 'ｔ'],
    'u': ['υ', 'ц', 'ｕ'],
    'v': ['ν', 'ѵ', 'ｖ'],
    'w': ['ω', 'ｗ'],
    'x': ['х', 'χ', 'ｘ'],
    'y': ['у', 'γ', 'ｙ'],
    'z': ['ᴢ', 'ｚ'],
}

# Reverse mapping for normalization
HOMOGLYPH_TO_ASCII = {}
for ascii_char, confusables in HOMOGLYPHS.items():
    for confusable in confusables:
        HOMOGLYPH_TO_ASCII[confusable] = ascii_char

# Digits and symbols used in place of letters (paypa1, g00gle)
DIGIT_SUBSTITUTIONS = {
    '0': 'o',
    '1': 'l',
    '3': 'e',
    '4': 'a',
    '5': 's',
    '7': 't',
    '8': 'b',
    '@': 'a',
    '|': 'l',
}


@dataclass
class LookalikeMatch:
    """A domain that imitates a brand."""
    brand: str
    brand_label: str
    legitimate_domain: str
    method: str                 # homoglyph, numeric_substitution, edit_distance, embedded_brand
    distance: int
    substitutions: List[str] = field(default_factory=list)


# =============================================================================
# DISTANCE
# =============================================================================

def edit_distance(a: str, b: str) -> int:
    """
    Damerau-Levenshtein distance (optimal string alignment variant).

    Insertions, deletions, substitutions and adjacent transpositions all
    cost 1.
    """
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    rows = len(a) + 1
    cols = len(b) + 1
    d = [[0] * cols for _ in range(rows)]
    for i in range(rows):
        d[i][0] = i
    for j in range(cols):
        d[0][j] = j

    for i in range(1, rows):
        for j in range(1, cols):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            d[i][j] = min(
                d[i - 1][j] + 1,         # deletion
                d[i][j - 1] + 1,         # insertion
                d[i - 1][j - 1] + cost,  # substitution
            )
            if i > 1 and j > 1 and a[i - 1] == b[j - 2] and a[i - 2] == b[j - 1]:
                d[i][j] = min(d[i][j], d[i - 2][j - 2] + 1)  # transposition

    return d[-1][-1]


# =============================================================================
# NORMALIZATION
# =============================================================================

def decode_punycode(domain: str) -> str:
    """Decode xn-- labels so confusables become visible."""
    labels = []
    for label in domain.split('.'):
        if label.startswith('xn--'):
            try:
                label = label.encode('ascii').decode('idna')
            except UnicodeError:
                logger.debug(f"Undecodable punycode label: {label}")
        labels.append(label)
    return '.'.join(labels)


def normalize_homoglyphs(text: str) -> Tuple[str, List[str]]:
    """Map Unicode confusables to ASCII; returns (normalized, confusables found)."""
    found = []
    chars = []
    for ch in text:
        if ch in HOMOGLYPH_TO_ASCII:
            found.append(ch)
            chars.append(HOMOGLYPH_TO_ASCII[ch])
        else:
            chars.append(ch)
    return ''.join(chars), found


def normalize_digits(text: str) -> Tuple[str, List[str]]:
    """Map digit/symbol substitutions to letters; returns (normalized, substitutes found)."""
    found = [ch for ch in text if ch in DIGIT_SUBSTITUTIONS]
    return ''.join(DIGIT_SUBSTITUTIONS.get(ch, ch) for ch in text), found


def scripts_in(text: str) -> List[str]:
    """Unicode scripts of the alphabetic characters, sorted."""
    scripts = set()
    for ch in text:
        if not ch.isalpha():
            continue
        try:
            scripts.add(unicodedata.name(ch).split(' ')[0])
        except ValueError:
            scripts.add("UNKNOWN")
    return sorted(scripts)


def domain_tokens(domain: str) -> List[str]:
    """Labels and hyphen-separated pieces, without the TLD."""
    registrable = registrable_domain(domain)
    suffix = registrable.split('.', 1)[1] if '.' in registrable else ''
    stem = domain[:-(len(suffix) + 1)] if suffix and domain.endswith('.' + suffix) else domain
    return [t for t in re.split(r'[.\-]', stem) if t]


# =============================================================================
# MATCHING
# =============================================================================

def lookalike_points(match: LookalikeMatch, scoring: ReputationScoring) -> int:
    """Reputation points for a lookalike match."""
    if match.method == "homoglyph":
        return scoring.homoglyph
    if match.method in ("numeric_substitution", "edit_distance"):
        return scoring.lookalike_distance_one if match.distance <= 1 else scoring.lookalike_distance_two
    return scoring.embedded_brand


def find_lookalike(
    domain: str,
    brands: Sequence[BrandProfile],
    scoring: ReputationScoring,
) -> Optional[LookalikeMatch]:
    """
    Find the strongest brand imitation in a domain.

    Args:
        domain: Sender domain (may contain Unicode or punycode)
        brands: Brand profiles to compare against
        scoring: Distance bounds and point values

    Returns:
        Best LookalikeMatch, or None for unrelated or legitimate domains
    """
    if not domain:
        return None

    decoded = decode_punycode(domain.lower())
    if any(domain_matches(decoded, list(b.domains)) for b in brands):
        return None

    registrable = registrable_domain(decoded)
    label = registrable.split('.')[0]
    homoglyph_label, confusables = normalize_homoglyphs(label)
    clean_label, digits = normalize_digits(homoglyph_label)
    tokens = domain_tokens(decoded)

    candidates: List[LookalikeMatch] = []
    for brand in brands:
        for brand_label in brand.labels:
            legit = next((d for d in brand.domains if d.startswith(brand_label + '.')), brand.domains[0])

            # Confusables that resolve exactly onto the brand, or the bare brand on a foreign suffix
            if clean_label == brand_label and len(brand_label) >= scoring.embedded_min_length:
                if label == brand_label:
                    method = "embedded_brand"
                else:
                    method = "homoglyph" if confusables else "numeric_substitution"
                candidates.append(LookalikeMatch(
                    brand=brand.name,
                    brand_label=brand_label,
                    legitimate_domain=legit,
                    method=method,
                    distance=edit_distance(label, brand_label),
                    substitutions=confusables + digits,
                ))
                continue

            # Near-miss spelling
            if len(brand_label) >= scoring.min_label_length and len(clean_label) >= scoring.min_label_length:
                limit = 1 if len(brand_label) < scoring.short_brand_length else scoring.max_lookalike_distance
                distance = edit_distance(clean_label, brand_label)
                if 0 < distance <= limit:
                    candidates.append(LookalikeMatch(
                        brand=brand.name,
                        brand_label=brand_label,
                        legitimate_domain=legit,
                        method="edit_distance",
                        distance=distance,
                        substitutions=confusables + digits,
                    ))
                    continue

            # Brand used as one token of a longer name (paypal-support.com)
            if len(brand_label) >= scoring.embedded_min_length:
                cleaned_tokens = [normalize_digits(normalize_homoglyphs(t)[0])[0] for t in tokens]
                embedded = brand_label in cleaned_tokens and len(tokens) > 1
                if not embedded and len(brand_label) >= scoring.short_brand_length:
                    embedded = any(brand_label in t and t != brand_label for t in cleaned_tokens)
                if embedded:
                    candidates.append(LookalikeMatch(
                        brand=brand.name,
                        brand_label=brand_label,
                        legitimate_domain=legit,
                        method="embedded_brand",
                        distance=0,
                    ))

    if not candidates:
        return None

    # Strongest signal first; ties broken by distance then brand name
    candidates.sort(key=lambda m: (-lookalike_points(m, scoring), m.distance, m.brand, m.brand_label))
    return candidates[0]
