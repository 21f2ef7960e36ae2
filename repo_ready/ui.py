"""
ui — Terminal UI primitives for the repo-ready CLI.

Colours, status lines, prompts and pickers.
"""

import sys

# ── Colour constants ─────────────────────────────────────────────────────

CYAN    = "\033[36m"
BOLD    = "\033[1m"
DIM     = "\033[2m"
GREEN   = "\033[32m"
YELLOW  = "\033[33m"
RED     = "\033[31m"
BLUE    = "\033[34m"
RESET   = "\033[0m"

QUIT = "__QUIT__"


# ── Screen helpers ───────────────────────────────────────────────────────

def banner():
    print(f"""
{BOLD}{CYAN}  ┌──────────────────────────────────────────────┐
  │               🚀  repo-ready                 │
  │    Git templates · hooks · GitHub labels     │
  └──────────────────────────────────────────────┘{RESET}
""")


# ── Status output ────────────────────────────────────────────────────────

def info(text):
    print(f"  {BLUE}💡 {text}{RESET}")


def ok(text):
    print(f"  {GREEN}✅ {text}{RESET}")


def warn(text):
    print(f"  {YELLOW}⚠️  {text}{RESET}", file=sys.stderr)


def error(text):
    print(f"  {RED}🚫 {text}{RESET}", file=sys.stderr)


# ── Input primitives ─────────────────────────────────────────────────────

def prompt(text, default=None):
    """Prompt for text input. Returns QUIT on 'q' or Ctrl+D / Ctrl+C."""
    suffix = f" {DIM}[{default}]{RESET}" if default else ""
    try:
        raw = input(f"  {CYAN}▸{RESET} {text}{suffix}: ").strip()
    except (EOFError, KeyboardInterrupt):
        return QUIT
    if raw.lower() == "q":
        return QUIT
    return raw if raw else default


def required(text):
    """Prompt until a non-empty answer is given."""
    while True:
        raw = prompt(text)
        if raw == QUIT or raw:
            return raw
        print(f"    {RED}This field is required.{RESET}")


def pick_one(title, options):
    """
    Display numbered options, given as (value, label) pairs.
    Returns the chosen value or QUIT. A value can also be typed directly.
    """
    print(f"  {BOLD}{title}{RESET}\n")
    for i, (_, label) in enumerate(options, 1):
        print(f"    {CYAN}{i:>2}{RESET}  {label}")
    print()

    values = [value for value, _ in options]
    while True:
        raw = prompt("Choose")
        if raw in (QUIT, None):
            return QUIT
        if raw.isdigit():
            idx = int(raw) - 1
            if 0 <= idx < len(values):
                return values[idx]
        for value in values:
            if value.lower() == raw.lower():
                return value
        print(f"    {DIM}Enter a number (1-{len(values)}) or an ID{RESET}")


def pick_many(title, options, defaults=()):
    """
    Checkbox-style picker. `options` is a list of (value, label, disabled)
    where `disabled` is False or a reason string.
    Returns the chosen values in display order, or QUIT.
    """
    print(f"  {BOLD}{title}{RESET}\n")
    for i, (value, label, disabled) in enumerate(options, 1):
        if disabled:
            print(f"    {DIM}{i:>2}  {label}  ({disabled}){RESET}")
        else:
            mark = "●" if value in defaults else "○"
            print(f"    {CYAN}{i:>2}{RESET}  {mark} {label}")
    print(f"\n  {DIM}comma-separated numbers · enter = marked ● · q = quit{RESET}\n")

    enabled = [value for value, _, disabled in options if not disabled]
    while True:
        raw = prompt("Select")
        if raw == QUIT:
            return QUIT
        if raw is None:
            return [value for value in enabled if value in defaults]
        chosen = set()
        valid = True
        for part in raw.replace(" ", "").split(","):
            if not part:
                continue
            if not part.isdigit() or not 1 <= int(part) <= len(options):
                valid = False
                break
            value, _, disabled = options[int(part) - 1]
            if disabled:
                valid = False
                break
            chosen.add(value)
        if valid:
            return [value for value in enabled if value in chosen]
        print(f"    {DIM}Enter numbers between 1 and {len(options)} for available entries{RESET}")
