"""
Probe command implementation.

Reports the nrfjprog library version, or how a failure would be handled.
Never downloads anything.
"""

import logging

from nrfjprog_fetch.binding.classifier import classify_failure
from nrfjprog_fetch.binding.prober import CapabilityProber
from nrfjprog_fetch.cli.utils import (
    EXIT_ENVIRONMENT,
    EXIT_FAILURE,
    EXIT_SUCCESS,
    load_run_context,
)
from nrfjprog_fetch.core.exceptions import (
    ConfigurationError,
    UnsupportedPlatformError,
)

logger = logging.getLogger(__name__)

_ADVICE = {
    "headers_present": "nrfjprog is installed system-wide; nothing to fetch",
    "library_missing": "run 'nrfjprog-fetch fetch' to download the libraries",
    "bindings_missing": (
        "run 'nrfjprog-fetch fetch', then build the binding against the headers"
    ),
    "unrelated": "not caused by missing nrfjprog libraries; fetching will not help",
}


def run(args) -> int:
    """
    Run the probe command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 if the library works)
    """
    try:
        context = load_run_context(args)
    except (ConfigurationError, UnsupportedPlatformError) as e:
        logger.error(str(e))
        return EXIT_ENVIRONMENT

    result = CapabilityProber(context.config, context.settings.binding_module).probe()
    if result.ok:
        print(f"nrfjprog library version: {result.version}")
        return EXIT_SUCCESS

    classification = classify_failure(result.failure, context.config)
    kind = classification.kind.value
    print(f"nrfjprog library unavailable: {result.failure.message}")
    print(f"  classification: {kind}")
    print(f"  advice: {_ADVICE[kind]}")
    return EXIT_FAILURE
