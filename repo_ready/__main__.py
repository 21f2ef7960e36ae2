"""Entry point: python3 -m repo_ready"""

from .cli import main

if __name__ == "__main__":
    main()
