"""
Entry point for running the nrfjprog-fetch CLI as a module.

Usage: python -m nrfjprog_fetch.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
