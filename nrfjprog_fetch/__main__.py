"""
Entry point for running nrfjprog-fetch as a module.

Usage: python -m nrfjprog_fetch [command] [options]
"""

from nrfjprog_fetch.cli.parser import main

if __name__ == "__main__":
    main()
