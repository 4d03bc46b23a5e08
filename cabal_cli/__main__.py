"""
Module execution entry point.

Allows running with: python -m cabal_cli
"""

import sys
from cabal_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
