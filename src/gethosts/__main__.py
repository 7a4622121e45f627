"""Allow running as ``python -m gethosts``."""

from gethosts.cli import main

if __name__ == "__main__":
    main()
