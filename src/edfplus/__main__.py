"""Entry point for ``python -m edfplus``."""

from edfplus.cli import main

if __name__ == "__main__":
    main()
