"""
config — Runtime configuration for the repo-ready CLI.

Template, hook and label sources are read from a JSON file.
Search order:
1) $REPO_READY_CONFIG (explicit path)
2) <cwd>/.repo-ready/sources.json
3) ~/.repo-ready/sources.json
4) the sources.json bundled with the package

OAuth client credentials come from GITHUB_CLIENT_ID / GITHUB_CLIENT_SECRET.
A .env file (the nearest one found from the working directory upwards) is
loaded at startup; variables already set in the environment win.
"""

import json
import os

from dotenv import find_dotenv, load_dotenv


PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
BUNDLED_SOURCES = os.path.join(PACKAGE_DIR, "sources.json")

CALLBACK_PORT = 3003
OAUTH_SCOPES = "repo,user"
AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
TOKEN_URL = "https://github.com/login/oauth/access_token"
API_URL = "https://api.github.com"
HTTP_TIMEOUT = 30

CATEGORIES = ("templates", "hooks", "labels")


class ConfigError(Exception):
    """Missing credentials or a malformed sources file."""


# ═════════════════════════════════════════════════════════════════════════════
# DATA MODEL
# ═════════════════════════════════════════════════════════════════════════════

class RepoRef:
    __slots__ = ("owner", "repo", "branch")

    def __init__(self, owner, repo, branch="main"):
        self.owner = owner
        self.repo = repo
        self.branch = branch or "main"

    @property
    def full_name(self):
        return f"{self.owner}/{self.repo}"

    @property
    def url(self):
        return f"https://github.com/{self.owner}/{self.repo}"

    def __repr__(self):
        return f"RepoRef({self.full_name!r}, branch={self.branch!r})"


class FileMapping:
    __slots__ = ("remote_path", "local_path")

    def __init__(self, remote_path, local_path):
        self.remote_path = remote_path
        self.local_path = local_path

    def __repr__(self):
        return f"FileMapping({self.remote_path!r} → {self.local_path!r})"


class FileSource:
    """A template or hook set: files copied from one repository."""

    __slots__ = ("id", "name", "description", "lang", "repo_info", "files")

    def __init__(self, id, name, description, repo_info, files, lang=None):
        self.id = id
        self.name = name
        self.description = description
        self.lang = lang
        self.repo_info = repo_info
        self.files = tuple(files)

    def __repr__(self):
        return f"FileSource({self.id!r})"


class LabelSource:
    __slots__ = ("id", "name", "description", "lang", "source_type",
                 "repo_info", "source_path")

    def __init__(self, id, name, description, source_type,
                 repo_info=None, source_path=None, lang=None):
        self.id = id
        self.name = name
        self.description = description
        self.lang = lang
        self.source_type = source_type
        self.repo_info = repo_info
        self.source_path = source_path

    def __repr__(self):
        return f"LabelSource({self.id!r}, {self.source_type!r})"


class Sources:
    def __init__(self, templates=(), hooks=(), labels=(), path=None):
        self.templates = list(templates)
        self.hooks = list(hooks)
        self.labels = list(labels)
        self.path = path

    def category(self, name):
        return getattr(self, name)

    def find(self, category, source_id):
        for item in self.category(category):
            if item.id == source_id:
                return item
        return None

    def is_empty(self):
        return not (self.templates or self.hooks or self.labels)


# ═════════════════════════════════════════════════════════════════════════════
# LOADING
# ═════════════════════════════════════════════════════════════════════════════

def _candidate_paths():
    return [
        os.getenv("REPO_READY_CONFIG"),
        os.path.join(os.getcwd(), ".repo-ready", "sources.json"),
        os.path.join(os.path.expanduser("~"), ".repo-ready", "sources.json"),
        BUNDLED_SOURCES,
    ]


def find_sources_file():
    for path in _candidate_paths():
        if path and os.path.isfile(path):
            return path
    return None


def load_sources(path=None):
    """Load and validate the sources file. Returns an empty Sources if none exists."""
    path = path or find_sources_file()
    if not path:
        return Sources()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as exc:
        raise ConfigError(f"Cannot read sources file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Sources file {path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Sources file {path}: root must be a JSON object")

    base_dir = os.path.dirname(os.path.abspath(path))
    try:
        return Sources(
            templates=[_parse_file_source(e) for e in _entries(data, "templates")],
            hooks=[_parse_file_source(e) for e in _entries(data, "hooks")],
            labels=[_parse_label_source(e, base_dir) for e in _entries(data, "labels")],
            path=path,
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ConfigError(f"Sources file {path}: {exc}") from exc


def _entries(data, key):
    entries = data.get(key) or []
    if not isinstance(entries, list):
        raise ConfigError(f"'{key}' must be a list")
    return entries


def _require(entry, key):
    if not isinstance(entry, dict):
        raise ValueError(f"expected an object, got {entry!r}")
    value = entry.get(key)
    if not value:
        raise ValueError(f"entry {entry.get('id', '?')!r} is missing '{key}'")
    return value


def _parse_repo(entry):
    repo_info = _require(entry, "repo_info")
    return RepoRef(
        owner=_require(repo_info, "owner"),
        repo=_require(repo_info, "repo"),
        branch=repo_info.get("branch", "main"),
    )


def _parse_file_source(entry):
    files = [
        FileMapping(_require(f, "remote_path"), _require(f, "local_path"))
        for f in _require(entry, "files")
    ]
    return FileSource(
        id=str(_require(entry, "id")),
        name=_require(entry, "name"),
        description=entry.get("description", ""),
        lang=entry.get("lang"),
        repo_info=_parse_repo(entry),
        files=files,
    )


def _parse_label_source(entry, base_dir):
    source_type = _require(entry, "source_type")
    repo_info = source_path = None
    if source_type == "json_url":
        repo_info = _parse_repo(entry)
    elif source_type == "json_file":
        source_path = os.path.join(base_dir, _require(entry, "source_path"))
    return LabelSource(
        id=str(_require(entry, "id")),
        name=_require(entry, "name"),
        description=entry.get("description", ""),
        lang=entry.get("lang"),
        source_type=source_type,
        repo_info=repo_info,
        source_path=source_path,
    )


# ── OAuth client credentials ─────────────────────────────────────────────

def oauth_credentials():
    client_id = os.getenv("GITHUB_CLIENT_ID")
    client_secret = os.getenv("GITHUB_CLIENT_SECRET")
    if not client_id or not client_secret:
        raise ConfigError(
            "GITHUB_CLIENT_ID or GITHUB_CLIENT_SECRET environment variables are not set."
        )
    return client_id, client_secret


# ── Environment ──────────────────────────────────────────────────────────

def load_env_file(path=None):
    """Load a .env file into os.environ without overriding what is already set."""
    path = path or find_dotenv(usecwd=True)
    if not path:
        return False
    return load_dotenv(path, override=False)


def token_path():
    return os.getenv(
        "REPO_READY_TOKEN_PATH",
        os.path.join(os.path.expanduser("~"), ".repo-ready-github-token"),
    )


def login_timeout():
    raw = os.getenv("REPO_READY_LOGIN_TIMEOUT", "300")
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"REPO_READY_LOGIN_TIMEOUT must be a number of seconds, got {raw!r}.")
