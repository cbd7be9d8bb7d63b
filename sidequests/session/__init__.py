"""
Session module - Hosting of live sidequest games.

Games are ephemeral and in-memory; only finished-session results are
handed to the store.
"""

from .manager import SessionManager, HostedGame

__all__ = [
    "SessionManager",
    "HostedGame",
]
