"""
PhishSense Constants - Central location for ALL pattern tables.

The default pattern store is built from these tables. Point values live in
config/scoring.py; this module only says WHAT to look for.
"""

from typing import Dict, List

# DETECTORS (combination order, also the order findings are reported in)
DETECTOR_ORDER: List[str] = ["rules", "headers", "reputation", "behavior", "ml", "misc"]

# KEYWORD CATEGORIES
# Each category: weight (points per match), severity, patterns (lowercase phrases)
PHISHING_KEYWORDS: Dict[str, Dict] = {
    "credential": {
        "weight": 25,
        "severity": "high",
        "patterns": [
            "verify your account", "confirm your identity", "reset your password",
            "confirm your password", "enter your password", "login credentials",
            "sign in to verify", "update your payment", "credit card number",
            "social security number", "bank account details", "verify your identity",
        ],
    },
    "urgency": {
        "weight": 15,
        "severity": "medium",
        "patterns": [
            "urgent", "immediately", "act now", "within 24 hours", "action required",
            "final notice", "expires today", "limited time", "respond now", "asap",
        ],
    },
    "threat": {
        "weight": 20,
        "severity": "high",
        "patterns": [
            "account suspended", "account will be closed", "unauthorized access",
            "unusual activity", "legal action", "locked out", "security breach",
            "account has been compromised", "permanently deleted",
        ],
    },
    "reward": {
        "weight": 10,
        "severity": "low",
        "patterns": [
            "congratulations", "you have won", "claim your prize", "gift card",
            "free money", "lottery", "you've been selected", "exclusive reward",
        ],
    },
    "financial": {
        "weight": 15,
        "severity": "medium",
        "patterns": [
            "wire transfer", "bank transfer", "invoice attached", "payment overdue",
            "routing number", "bitcoin", "gift cards", "outstanding balance",
        ],
    },
}

# STRUCTURAL RULE CATEGORIES (points per match and severity)
RULE_CATEGORIES: Dict[str, Dict] = {
    "suspicious_domain": {"weight": 30, "severity": "high"},
    "ip_url": {"weight": 25, "severity": "high"},
    "url_shortener": {"weight": 20, "severity": "medium"},
    "suspicious_tld": {"weight": 12, "severity": "medium"},
    "suspicious_url": {"weight": 10, "severity": "medium"},
    "sender_ip": {"weight": 20, "severity": "medium"},
    "domain_mismatch": {"weight": 25, "severity": "high"},
    "attachment": {"weight": 30, "severity": "high"},
    "link_mismatch": {"weight": 25, "severity": "high"},
    "html_obfuscation": {"weight": 8, "severity": "low"},
}

# URL SHORTENERS
SHORTENER_DOMAINS: List[str] = [
    "bit.ly", "tinyurl.com", "goo.gl", "t.co", "ow.ly", "is.gd", "buff.ly",
    "adf.ly", "bit.do", "cutt.ly", "rb.gy", "shorturl.at", "tiny.cc",
    "rebrand.ly", "t.ly", "v.gd",
]

# URL KEYWORDS (path or host)
SUSPICIOUS_URL_KEYWORDS: List[str] = [
    "login", "signin", "verify", "secure", "account", "update", "confirm",
    "webscr", "banking", "password", "wallet",
]

SUSPICIOUS_TLDS: List[str] = [
    ".xyz", ".top", ".club", ".work", ".click", ".link", ".gq", ".ml", ".cf",
    ".tk", ".ga", ".buzz", ".rest", ".fit", ".cam", ".icu", ".monster", ".zip",
]

# KNOWN BAD INFRASTRUCTURE (free hosting, tunnels, dynamic DNS)
SUSPICIOUS_DOMAINS: List[str] = [
    "000webhostapp.com", "ngrok.io", "ngrok-free.app", "duckdns.org",
    "no-ip.com", "serveo.net", "weeblysite.com", "firebaseapp.com",
    "glitch.me", "repl.co", "web.app",
]

# ATTACHMENTS
DANGEROUS_EXTENSIONS: Dict[str, List[str]] = {
    "executable": [".exe", ".scr", ".pif", ".msi", ".dll", ".cpl"],
    "script": [".jse", ".vbs", ".vbe", ".wsf", ".wsh", ".ps1", ".bat", ".cmd", ".hta"],
    "macro": [".docm", ".xlsm", ".pptm", ".dotm", ".xlam"],
    "archive": [".iso", ".img", ".rar", ".7z", ".ace"],
    "shortcut": [".lnk"],
}

# HTML INDICATORS (lowercase, compared against lowercased body)
HTML_INDICATORS: Dict[str, List[str]] = {
    "hidden_text": ["display:none", "visibility:hidden", "font-size:0", "opacity:0", "color:#ffffff"],
    "forms": ["<form", "type=\"password\""],
    "scripts": ["<script", "javascript:", "onload=", "onclick=", "onmouseover="],
    "embedded": ["<iframe", "<object", "<embed"],
    "encoding": ["&#x", "data:text/html", "base64,"],
}

# TRUSTED SENDERS AND LINKS
TRUSTED_DOMAINS: List[str] = [
    "google.com", "microsoft.com", "apple.com", "amazon.com", "paypal.com",
    "github.com", "linkedin.com", "dropbox.com", "salesforce.com",
]

TRUSTED_URL_PREFIXES: List[str] = [
    "https://www.google.com/", "https://accounts.google.com/",
    "https://login.microsoftonline.com/", "https://www.microsoft.com/",
    "https://github.com/", "https://www.paypal.com/", "https://www.amazon.com/",
]

# BRAND PROFILES (used for lookalike and impersonation checks)
BRAND_TARGETS: Dict[str, Dict] = {
    "microsoft": {
        "name": "Microsoft",
        "keywords": ["microsoft", "office 365", "outlook", "onedrive", "sharepoint"],
        "legitimate_domains": ["microsoft.com", "office.com", "outlook.com", "live.com", "microsoftonline.com"]
    },
    "google": {
        "name": "Google",
        "keywords": ["google", "gmail"],
        "legitimate_domains": ["google.com", "gmail.com", "googlemail.com"]
    },
    "amazon": {
        "name": "Amazon",
        "keywords": ["amazon", "aws"],
        "legitimate_domains": ["amazon.com", "amazon.co.uk", "amazonaws.com"]
    },
    "paypal": {
        "name": "PayPal",
        "keywords": ["paypal", "pay pal"],
        "legitimate_domains": ["paypal.com", "paypal.me"]
    },
    "apple": {
        "name": "Apple",
        "keywords": ["apple", "icloud", "apple id"],
        "legitimate_domains": ["apple.com", "icloud.com", "me.com"]
    },
    "netflix": {
        "name": "Netflix",
        "keywords": ["netflix"],
        "legitimate_domains": ["netflix.com"]
    },
    "facebook": {
        "name": "Facebook",
        "keywords": ["facebook", "meta"],
        "legitimate_domains": ["facebook.com", "facebookmail.com", "meta.com"]
    },
    "linkedin": {
        "name": "LinkedIn",
        "keywords": ["linkedin"],
        "legitimate_domains": ["linkedin.com"]
    },
    "dropbox": {
        "name": "Dropbox",
        "keywords": ["dropbox"],
        "legitimate_domains": ["dropbox.com", "dropboxmail.com"]
    },
    "docusign": {
        "name": "DocuSign",
        "keywords": ["docusign"],
        "legitimate_domains": ["docusign.com", "docusign.net"]
    },
    "wellsfargo": {
        "name": "Wells Fargo",
        "keywords": ["wells fargo"],
        "legitimate_domains": ["wellsfargo.com"]
    },
    "chase": {
        "name": "Chase",
        "keywords": ["chase bank", "jpmorgan"],
        "legitimate_domains": ["chase.com", "jpmorganchase.com"]
    },
    "bankofamerica": {
        "name": "Bank of America",
        "keywords": ["bank of america"],
        "legitimate_domains": ["bankofamerica.com", "bofa.com"]
    },
    "dhl": {
        "name": "DHL",
        "keywords": ["dhl express"],
        "legitimate_domains": ["dhl.com"]
    },
    "fedex": {
        "name": "FedEx",
        "keywords": ["fedex"],
        "legitimate_domains": ["fedex.com"]
    },
}

# Registrable suffixes with two labels (example.co.uk)
SECOND_LEVEL_SUFFIXES: List[str] = [
    "co.uk", "org.uk", "ac.uk", "gov.uk", "com.au", "net.au", "co.in", "co.jp",
    "com.br", "co.nz", "co.za", "com.mx",
]

# Common TLDs; anything else is scored as uncommon by the reputation analyzer
COMMON_TLDS: List[str] = [
    "com", "org", "net", "edu", "gov", "mil", "io", "co", "us", "uk", "ca",
    "de", "fr", "au", "in", "jp", "nl", "es", "it", "se", "ch", "me", "app",
    "dev", "ai",
]

# HEADER ANOMALIES
SUSPICIOUS_HEADERS: List[str] = [
    "x-php-originating-script", "x-php-script", "x-source-args",
    "x-source", "x-source-dir", "x-authenticated-sender", "x-originating-ip",
]

# Mechanism results that count as a hard authentication failure
AUTH_HARD_FAIL_STATES: List[str] = ["fail", "hardfail", "permerror", "reject", "quarantine"]
AUTH_SOFT_FAIL_STATES: List[str] = ["softfail"]
AUTH_NEUTRAL_STATES: List[str] = ["none", "neutral", "temperror", "policy"]

# CONTENT HYGIENE
GENERIC_GREETINGS: List[str] = [
    "dear customer", "dear user", "dear valued customer", "dear account holder",
    "dear client", "dear member", "hello user", "dear sir/madam",
]
