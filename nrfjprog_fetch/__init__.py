"""
nrfjprog-fetch: fetch the nRF5x command line tools libraries when missing.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("nrfjprog-fetch")
except PackageNotFoundError:
    __version__ = "0.1.0"
