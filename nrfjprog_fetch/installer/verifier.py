"""
Post-install verification.

Re-runs the capability probe after a fetch to confirm the library now loads.
"""

import logging

from nrfjprog_fetch.binding.prober import CapabilityProber
from nrfjprog_fetch.core.exceptions import LibraryProbeError

logger = logging.getLogger(__name__)


def verify_installation(prober: CapabilityProber) -> str:
    """
    Probe the library once more.

    Args:
        prober: Prober used for the initial probe

    Returns:
        Library version reported after the fetch

    Raises:
        LibraryProbeError: If the library still cannot be used
    """
    result = prober.probe()
    if not result.ok:
        raise LibraryProbeError(result.failure.message)

    logger.info(
        f"Automated fetch of nrfjprog seems to have worked, now at {result.version}"
    )
    return result.version
