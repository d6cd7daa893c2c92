"""
PhishSense

Multi-signal email phishing analysis engine.
"""

__version__ = "2.0.0"
