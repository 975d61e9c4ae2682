"""Project root entry point for running the translator without installing it."""

import sys

from autotranslate.cli import main


if __name__ == "__main__":
    sys.exit(main())
