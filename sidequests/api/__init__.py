"""
API module - REST interface for hosting sidequests.

The service layer is framework-agnostic; app.py exposes it over FastAPI.
"""

from .service import APIService
from .app import create_app

__all__ = [
    "APIService",
    "create_app",
]
