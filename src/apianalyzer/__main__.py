"""
Main entry point for apianalyzer when run as a module.

Allows execution via: python -m apianalyzer

apianalyzer/src/apianalyzer/__main__.py
"""

from .cli import main

if __name__ == "__main__":
    main()
