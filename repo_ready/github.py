"""
github — Minimal GitHub REST client and remote file fetcher.
"""

import base64
import os
from urllib.parse import quote

import requests

from .config import API_URL, HTTP_TIMEOUT
from .ui import ok, info


RAW_MEDIA_TYPE = "application/vnd.github.raw"


class GitHubError(Exception):
    def __init__(self, status, message, errors=None):
        super().__init__(message)
        self.status = status
        self.message = message
        self.errors = errors or []

    def has_error_code(self, code):
        return any(isinstance(e, dict) and e.get("code") == code for e in self.errors)


class NotFoundError(GitHubError):
    pass


class NotAFileError(GitHubError):
    pass


# ── Low-level client ─────────────────────────────────────────────────────

class GitHubClient:
    """
    Thin wrapper over the REST API. The token is taken from `credentials`
    (anything with a `token()` method) on the first request.
    """

    def __init__(self, credentials, session=None, api_url=API_URL):
        self.credentials = credentials
        self.session = session or requests.Session()
        self.api_url = api_url.rstrip("/")

    def _headers(self, accept="application/vnd.github+json"):
        return {
            "Authorization": f"Bearer {self.credentials.token()}",
            "Accept": accept,
            "User-Agent": "repo-ready",
        }

    def _send(self, method, path, accept=None, **kwargs):
        headers = self._headers(accept) if accept else self._headers()
        r = self.session.request(
            method, f"{self.api_url}{path}",
            headers=headers, timeout=HTTP_TIMEOUT, **kwargs,
        )
        if r.status_code >= 400:
            raise _error_from(r)
        return r

    def request(self, method, path, **kwargs):
        r = self._send(method, path, **kwargs)
        if r.status_code == 204 or not r.content:
            return None
        return r.json()

    def get(self, path, **params):
        return self.request("GET", path, params=params or None)

    def get_raw(self, path, **params):
        """GET with the raw media type; returns the response body as bytes."""
        r = self._send("GET", path, accept=RAW_MEDIA_TYPE, params=params or None)
        return r.content

    def post(self, path, payload):
        return self.request("POST", path, json=payload)

    def delete(self, path):
        return self.request("DELETE", path)


def _error_from(response):
    try:
        data = response.json()
    except ValueError:
        data = {}
    if not isinstance(data, dict):
        data = {}
    message = data.get("message") or response.reason or f"HTTP {response.status_code}"
    errors = data.get("errors") or []
    cls = NotFoundError if response.status_code == 404 else GitHubError
    return cls(response.status_code, message, errors)


# ── Contents ─────────────────────────────────────────────────────────────

def get_file_content(client, repo_ref, remote_path):
    """Return the decoded bytes of a single file at the ref's branch."""
    path = (f"/repos/{repo_ref.owner}/{repo_ref.repo}/contents/"
            f"{quote(remote_path.lstrip('/'))}")
    try:
        item = client.get(path, ref=repo_ref.branch)
    except NotFoundError as exc:
        raise NotFoundError(
            404,
            f"'{remote_path}' not found in {repo_ref.full_name} on branch "
            f"'{repo_ref.branch}' ({exc.message})",
        ) from exc

    if isinstance(item, list):
        raise NotAFileError(
            None,
            f"'{remote_path}' in {repo_ref.full_name} is a directory; only single files are copied.",
        )
    if not isinstance(item, dict) or item.get("type") != "file":
        kind = item.get("type") if isinstance(item, dict) else type(item).__name__
        raise NotAFileError(None, f"Unexpected content type for '{remote_path}': {kind}")
    if item.get("encoding") == "base64":
        return base64.b64decode(item.get("content") or "")
    # Files over 1 MB come back without inline content.
    data = client.get_raw(path, ref=repo_ref.branch)
    size = item.get("size")
    if size is not None and len(data) != size:
        raise GitHubError(
            None,
            f"'{remote_path}': expected {size} bytes, received {len(data)}",
        )
    return data


def fetch_file(client, repo_ref, remote_path, local_path):
    """Copy one remote file to `local_path`, overwriting it. Returns the byte count."""
    info(f"Fetching {remote_path} from {repo_ref.full_name} ({repo_ref.branch} branch)...")
    data = get_file_content(client, repo_ref, remote_path)
    parent = os.path.dirname(local_path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(local_path, "wb") as f:
        f.write(data)
    ok(f"Copied remote file: {remote_path} to {local_path}")
    return len(data)
