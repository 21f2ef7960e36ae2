"""
docs — Render the configured sources as an AVAILABLE_TEMPLATES.md document.
"""

import os

HEADER = """\
# Available Templates for repo-ready CLI

This document lists the GitHub repositories (and local files) from which you can fetch templates, Git hooks, and labels using the `repo-ready init` command. Each entry is identified by a unique `ID` for easy selection in the CLI.

---

## How to Use

When you run `repo-ready init`, you will be prompted to select which categories (Templates, Git Hooks, GitHub Labels) you want to set up. For each selected category, you will then be asked to choose an `ID` from the lists below.
"""

FOOTER = """
---

## Extending This List

Add entries to the `templates`, `hooks` or `labels` arrays of your `sources.json` (see `REPO_READY_CONFIG`), then run `repo-ready docs` to refresh this document.
"""


def _lang(item):
    return item.lang.upper() if item.lang else "N/A"


def _repo_cell(repo_ref):
    return f"`{repo_ref.url}`" if repo_ref else "N/A"


def _files_cell(item):
    return ", ".join(f"`{os.path.basename(f.local_path)}`" for f in item.files)


def _label_source_cell(item, base_dir):
    if item.source_type == "json_url" and item.repo_info:
        return f"`{item.repo_info.url}/labels`"
    if item.source_type == "json_file" and item.source_path:
        path = item.source_path
        if base_dir:
            path = os.path.relpath(path, base_dir)
        return f"Local file: `{path}`"
    return "N/A"


def _file_table(items, files_heading):
    lines = [
        f"| ID | Name | Description | Language | Source Repository | {files_heading} |",
        "|---|---|---|---|---|---|",
    ]
    for item in items:
        lines.append(
            f"| **{item.id}** | **{item.name}** | {item.description} | {_lang(item)} "
            f"| {_repo_cell(item.repo_info)} | {_files_cell(item)} |"
        )
    return "\n".join(lines) + "\n"


def render_markdown(sources):
    base_dir = os.path.dirname(os.path.abspath(sources.path)) if sources.path else None
    parts = [
        HEADER,
        "\n---\n\n## 📄 Templates (`.github` folders)\n\n"
        "These sets provide common GitHub issue and pull request templates.\n\n",
        _file_table(sources.templates, "Included Files"),
        "\n---\n\n## 🪝 Git Hooks (`.githooks` folders)\n\n"
        "These sets provide `pre-commit`, `pre-push`, and `commit-msg` hooks.\n\n",
        _file_table(sources.hooks, "Included Hooks"),
        "\n---\n\n## 🏷️ GitHub Labels\n\n"
        "These sets provide predefined GitHub labels for your repository. Selecting a set "
        "will first **delete all existing labels** in your target repository before adding "
        "the new ones.\n\n",
        "| ID | Name | Description | Language | Source |\n|---|---|---|---|---|\n",
    ]
    for item in sources.labels:
        parts.append(
            f"| **{item.id}** | **{item.name}** | {item.description} | {_lang(item)} "
            f"| {_label_source_cell(item, base_dir)} |\n"
        )
    parts.append(FOOTER)
    return "".join(parts)


def write_markdown(sources, path):
    """Write the document if it differs from what is on disk. True if written."""
    content = render_markdown(sources)
    try:
        with open(path, "r", encoding="utf-8") as f:
            if f.read() == content:
                return False
    except FileNotFoundError:
        pass
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    return True
