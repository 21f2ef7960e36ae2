"""
bootstrap — The interactive `init` command.

Category selection → one source set per category → templates/hooks are
copied file by file, labels replace the target repository's label set.
Everything runs sequentially; a failing file or label is reported and the
run moves on to the next one. If `git init` fails, templates and hooks are
skipped but labels, which only touch GitHub, are still applied.
"""

import os

import requests

from .auth import Credentials
from .config import CATEGORIES, load_sources
from .credentials import TokenStore
from .git import GitError, ensure_repo, make_executable, set_hooks_path
from .github import GitHubClient, GitHubError, NotFoundError, fetch_file
from .labels import ALREADY, DONE, FAILED, resolve_labels, summarize, sync_labels
from .ui import (
    BOLD, DIM, GREEN, YELLOW, RESET, QUIT,
    banner, error, info, ok, warn, pick_many, pick_one, required,
)

CATEGORY_TITLES = {
    "templates": "Templates (.github)",
    "hooks": "Git Hooks (.githooks)",
    "labels": "GitHub Labels",
}

DEFAULT_HOOKS_DIR = ".githooks"


def init_command(sources=None, client=None, cwd=None):
    sources = sources if sources is not None else load_sources()
    cwd = cwd or os.getcwd()

    banner()
    if sources.is_empty():
        warn("No template sources configured. Add entries to a sources.json "
             "(see REPO_READY_CONFIG).")
        return

    selected = _choose_categories(sources)
    if selected == QUIT or not selected:
        print(f"  {YELLOW}No categories selected for setup. Exiting.{RESET}")
        return

    try:
        ensure_repo(cwd)
        git_ready = True
    except GitError as exc:
        error(f"Failed to initialize Git repository: {exc}")
        git_ready = False
    skipped = []

    if client is None:
        client = GitHubClient(Credentials(TokenStore()))

    for category in selected:
        print()
        if category != "labels" and not git_ready:
            warn(f"Skipping {category}: no Git repository in {cwd}.")
            skipped.append(category)
            continue
        source = _choose_source(sources, category)
        if source == QUIT:
            print(f"  {DIM}Stopped.{RESET}")
            return
        if source is None:
            error(f"Invalid ID for {category} selected. Skipping this category.")
            continue

        if category == "labels":
            if setup_labels(client, source) == QUIT:
                return
        else:
            copy_files(client, source, cwd, hooks=(category == "hooks"))

    if skipped:
        print(f"\n  {YELLOW}Finished; skipped: {', '.join(skipped)}.{RESET}\n")
    else:
        print(f"\n  {GREEN}🎉 All selected settings completed!{RESET}\n")


# ── Prompts ──────────────────────────────────────────────────────────────

def _choose_categories(sources):
    options = [
        (cat, CATEGORY_TITLES[cat],
         False if sources.category(cat) else f"No {cat} configured")
        for cat in CATEGORIES
    ]
    defaults = [cat for cat in CATEGORIES if sources.category(cat)]
    return pick_many("Which categories would you like to set up?", options, defaults)


def _describe(item):
    lang = f" ({item.lang.upper()})" if item.lang else ""
    return f"{item.id} | {item.name} | {item.description}{lang}"


def _choose_source(sources, category):
    items = sources.category(category)
    picked = pick_one(
        f"Select a {category} set (enter ID):",
        [(item.id, _describe(item)) for item in items],
    )
    if picked == QUIT:
        return QUIT
    return sources.find(category, picked)


# ── Templates & hooks ────────────────────────────────────────────────────

def hooks_dir_for(source, cwd):
    if source.files:
        parent = os.path.dirname(source.files[0].local_path)
        if parent:
            return os.path.join(cwd, parent)
    return os.path.join(cwd, DEFAULT_HOOKS_DIR)


def copy_files(client, source, cwd, hooks=False):
    """Copy every file of a template/hook set. Returns the local paths written."""
    repo_ref = source.repo_info
    info(f"Fetching {'hooks' if hooks else 'templates'} from {repo_ref.full_name}...")

    if hooks:
        try:
            set_hooks_path(hooks_dir_for(source, cwd), cwd=cwd)
        except GitError as exc:
            error(f"Failed to set git hooks path: {exc}")

    written = []
    for mapping in source.files:
        local_path = os.path.join(cwd, mapping.local_path)
        try:
            fetch_file(client, repo_ref, mapping.remote_path, local_path)
            if hooks:
                make_executable(local_path)
        except NotFoundError as exc:
            error(f"Failed to copy {mapping.remote_path}: {exc}")
            print(f"     {DIM}Ensure the path '{mapping.remote_path}' exists in the remote "
                  f"repository's '{repo_ref.branch}' branch.{RESET}")
            continue
        except (GitHubError, requests.RequestException, OSError) as exc:
            error(f"Failed to copy {mapping.remote_path}: {exc}")
            continue
        written.append(local_path)
    return written


# ── Labels ───────────────────────────────────────────────────────────────

def setup_labels(client, source):
    """Prompt for the target repository and replace its labels. Returns the outcomes."""
    owner = required("GitHub Owner (username or organization name) for labels")
    if owner == QUIT:
        return QUIT
    repo = required("Repository name for labels")
    if repo == QUIT:
        return QUIT

    try:
        desired = resolve_labels(client, source)
        outcomes = sync_labels(client, owner, repo, desired)
    except (GitHubError, requests.RequestException, OSError, ValueError) as exc:
        error(f"Error setting up labels: {exc}")
        return []

    _print_summary(outcomes)
    return outcomes


def _print_summary(outcomes):
    counts = summarize(outcomes)
    print(f"\n  {BOLD}Labels{RESET}")
    for action in ("delete", "create"):
        done = counts.get((action, DONE), 0)
        already = counts.get((action, ALREADY), 0)
        failed = counts.get((action, FAILED), 0)
        print(f"    {action:8s}{GREEN}{done} done{RESET}  "
              f"{DIM}{already} already{RESET}  "
              f"{YELLOW if failed else DIM}{failed} failed{RESET}")
    if not any(o.status == FAILED for o in outcomes):
        ok("Label set replaced.")
