"""
Clipboard, screen capture, privilege and login-item helpers for the Grabber macOS app.
"""

__all__ = [
    "bundle",
    "capture",
    "cli",
    "clipboard",
    "config",
    "executor",
    "login_items",
    "privilege",
    "relaunch",
    "session",
    "support",
]
__version__ = "0.1.0"
