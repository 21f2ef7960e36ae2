"""
credentials — On-disk storage for the GitHub access token.
"""

import os

from .config import token_path
from .ui import error


class TokenStore:
    """A single plaintext token in a file only its owner can read."""

    def __init__(self, path=None):
        self.path = path or token_path()

    def store(self, token):
        # O_CREAT mode only applies to new files; chmod covers an existing one.
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(token)
        os.chmod(self.path, 0o600)

    def retrieve(self):
        """Return the stored token, or None when no token has been saved."""
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                token = f.read().strip()
        except FileNotFoundError:
            return None
        except OSError as exc:
            error(f"Failed to read GitHub token: {exc}")
            return None
        return token or None

    def clear(self):
        try:
            os.remove(self.path)
        except FileNotFoundError:
            pass
