"""
PhishSense API
"""

from .routes import get_api_router

__all__ = ['get_api_router']
