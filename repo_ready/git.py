"""
git — Local git wrappers: repository init, hooks path, executable hooks.
"""

import os
import stat
import subprocess

from .ui import info, ok


class GitError(Exception):
    pass


def git(*args, cwd=None):
    cmd = ["git"] + list(args)
    try:
        r = subprocess.run(cmd, cwd=cwd, capture_output=True, text=True)
    except FileNotFoundError as exc:
        raise GitError("git executable not found on PATH") from exc
    if r.returncode != 0:
        raise GitError(r.stderr.strip() or f"{' '.join(cmd)} exited with {r.returncode}")
    return r.stdout.strip()


def is_repo(cwd=None):
    try:
        return git("rev-parse", "--is-inside-work-tree", cwd=cwd) == "true"
    except GitError:
        return False


def ensure_repo(cwd=None):
    """Run `git init` unless `cwd` is already inside a work tree. True if created."""
    if is_repo(cwd):
        return False
    info("Initializing Git repository...")
    git("init", cwd=cwd)
    ok("Git repository initialized.")
    return True


def set_hooks_path(hooks_dir, cwd=None):
    git("config", "core.hooksPath", hooks_dir, cwd=cwd)
    ok(f"Git hooks path set to: {hooks_dir}")


def make_executable(path):
    mode = os.stat(path).st_mode
    os.chmod(path, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    ok(f"Made {os.path.basename(path)} executable.")
