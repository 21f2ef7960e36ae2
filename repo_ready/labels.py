"""
labels — Read label sets and replace a repository's labels with them.

Replacement is delete-all-then-create. GitHub has no atomic multi-label
operation, so a failure partway leaves the repository in a mixed state;
every attempted operation is reported back as a LabelOutcome.
"""

import json
from urllib.parse import quote

import requests

from .config import ConfigError
from .github import GitHubError, NotFoundError
from .ui import info, ok, warn, error

DONE = "done"
ALREADY = "already"
FAILED = "failed"


class Label:
    __slots__ = ("name", "color", "description")

    def __init__(self, name, color="ededed", description=""):
        self.name = name
        self.color = (color or "ededed").lstrip("#")
        self.description = description or ""

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict) or not data.get("name"):
            raise ValueError(f"Label entry must be an object with a name: {data!r}")
        return cls(data["name"], data.get("color"), data.get("description"))

    def to_dict(self):
        return {"name": self.name, "color": self.color, "description": self.description}

    def __repr__(self):
        return f"Label({self.name!r})"


class LabelOutcome:
    __slots__ = ("name", "action", "status", "error")

    def __init__(self, name, action, status, error=None):
        self.name = name
        self.action = action
        self.status = status
        self.error = error

    @property
    def ok(self):
        return self.status != FAILED

    def __repr__(self):
        return f"LabelOutcome({self.action} {self.name!r}: {self.status})"


# ── Sources ──────────────────────────────────────────────────────────────

def list_labels(client, owner, repo):
    """Current labels of a repository (first 100 only)."""
    data = client.get(f"/repos/{owner}/{repo}/labels", per_page=100)
    if not isinstance(data, list):
        raise GitHubError(None, f"Fetched label data is not a valid list: {data!r}")
    return [Label.from_dict(item) for item in data]


def read_label_file(path):
    info(f"Reading local JSON labels from {path}...")
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"Local label file content is not a valid list: {path}")
    return [Label.from_dict(item) for item in data]


def resolve_labels(client, source):
    if source.source_type == "json_url":
        repo_ref = source.repo_info
        info(f"Fetching labels from {repo_ref.full_name}...")
        return list_labels(client, repo_ref.owner, repo_ref.repo)
    if source.source_type == "json_file":
        return read_label_file(source.source_path)
    raise ConfigError(
        f"Invalid label source type {source.source_type!r} for {source.id!r}; "
        "expected 'json_url' or 'json_file'."
    )


# ── Synchronisation ──────────────────────────────────────────────────────

def delete_label(client, owner, repo, name):
    try:
        client.delete(f"/repos/{owner}/{repo}/labels/{quote(name, safe='')}")
    except NotFoundError:
        warn(f"Label '{name}' not found, skipping deletion (might have been deleted already).")
        return LabelOutcome(name, "delete", ALREADY)
    except (GitHubError, requests.RequestException) as exc:
        error(f"Failed to delete label '{name}': {exc}")
        return LabelOutcome(name, "delete", FAILED, str(exc))
    return LabelOutcome(name, "delete", DONE)


def create_label(client, owner, repo, label):
    try:
        client.post(f"/repos/{owner}/{repo}/labels", label.to_dict())
    except GitHubError as exc:
        if exc.status == 422 and exc.has_error_code("already_exists"):
            warn(f"Label '{label.name}' already exists, skipping.")
            return LabelOutcome(label.name, "create", ALREADY)
        error(f"Failed to create label '{label.name}': {exc}")
        return LabelOutcome(label.name, "create", FAILED, str(exc))
    except requests.RequestException as exc:
        error(f"Failed to create label '{label.name}': {exc}")
        return LabelOutcome(label.name, "create", FAILED, str(exc))
    return LabelOutcome(label.name, "create", DONE)


def sync_labels(client, owner, repo, desired):
    """
    Replace the labels of owner/repo with `desired`.

    Listing the current labels is the only step whose failure propagates;
    individual deletes and creates are reported in the returned outcomes.
    """
    info("Checking for and deleting existing labels...")
    outcomes = [
        delete_label(client, owner, repo, label.name)
        for label in list_labels(client, owner, repo)
    ]
    outcomes.extend(create_label(client, owner, repo, label) for label in desired)
    ok("All specified labels processed.")
    return outcomes


def summarize(outcomes):
    """{(action, status): count} for the given outcomes."""
    counts = {}
    for o in outcomes:
        counts[(o.action, o.status)] = counts.get((o.action, o.status), 0) + 1
    return counts
