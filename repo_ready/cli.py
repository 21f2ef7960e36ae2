"""
cli — Argparse entry point and the `login` / `docs` commands.
"""

import argparse
import os
import sys
import textwrap

from . import __version__
from .auth import OAuthError, run_oauth_flow
from .bootstrap import init_command
from .config import ConfigError, load_env_file, load_sources
from .credentials import TokenStore
from .docs import write_markdown
from .ui import CYAN, GREEN, RESET, YELLOW, error, ok


# ═════════════════════════════════════════════════════════════════════════════
# COMMANDS
# ═════════════════════════════════════════════════════════════════════════════

def login_command(store=None, **flow_options):
    store = store or TokenStore()
    if store.retrieve():
        print(f"  {YELLOW}💡 You are already logged in to GitHub.{RESET}")
        return None
    token = run_oauth_flow(store, **flow_options)
    print(f"  {GREEN}✅ Successfully logged in to GitHub! You can now run other commands.{RESET}")
    return token


def docs_command(config=None, output=None):
    sources = load_sources(config)
    if output is None:
        base = os.path.dirname(sources.path) if sources.path else os.getcwd()
        output = os.path.join(base, "AVAILABLE_TEMPLATES.md")
    if write_markdown(sources, output):
        ok(f"{output} updated.")
    else:
        print(f"  ℹ️  {output} is already up-to-date.")


# ═════════════════════════════════════════════════════════════════════════════
# MAIN
# ═════════════════════════════════════════════════════════════════════════════

def build_parser():
    parser = argparse.ArgumentParser(
        prog="repo-ready",
        description=f"{CYAN}A CLI tool to automate Git project setup and GitHub interactions.{RESET}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            Login needs a GitHub OAuth app:
              export GITHUB_CLIENT_ID=...  GITHUB_CLIENT_SECRET=...
            (or put both in a .env file in the working directory)
        """),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command")

    p_init = sub.add_parser("init", help="Set up Git hooks, template files and GitHub labels")
    p_init.add_argument("--config", help="Path to a sources.json file")

    sub.add_parser("login", help="Authenticate with GitHub using OAuth")

    p_docs = sub.add_parser("docs", help="Regenerate AVAILABLE_TEMPLATES.md from the sources file")
    p_docs.add_argument("--config", help="Path to a sources.json file")
    p_docs.add_argument("--output", help="Where to write the document")
    return parser


def main(argv=None):
    load_env_file()
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "init":
            init_command(load_sources(args.config))
        elif args.command == "login":
            login_command()
        elif args.command == "docs":
            docs_command(args.config, args.output)
        else:
            parser.print_help()
    except ConfigError as exc:
        error(f"Configuration error: {exc}")
        sys.exit(1)
    except OAuthError as exc:
        error(f"GitHub login failed: {exc}")
        sys.exit(1)
    except KeyboardInterrupt:
        print()
        sys.exit(130)
