"""Allow ``python -m declutter``."""

import sys

from declutter.ui.cli import main

if __name__ == "__main__":
    sys.exit(main())
