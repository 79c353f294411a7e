"""
Main entry point for NeuroGuard package

This allows running the package with: python -m neuroguard
"""

import sys

from .cli.main import main

if __name__ == "__main__":
    sys.exit(main())
