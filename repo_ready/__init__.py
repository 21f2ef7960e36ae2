"""
repo-ready — Bootstrap a Git repository with templates, hooks and GitHub labels.

Usage:
    repo-ready init     # interactive setup
    repo-ready login    # GitHub OAuth login
    repo-ready docs     # regenerate AVAILABLE_TEMPLATES.md

Login requires GITHUB_CLIENT_ID and GITHUB_CLIENT_SECRET.
"""

__version__ = "1.0.0"

from .cli import main  # noqa: E402
