"""
Failure classification for capability probes.

A failed probe is classified exactly once, by classify_failure(), into one of
the FailureKind variants. The classification decides whether the fetch
pipeline runs and whether the library is probed again afterwards.
"""

import logging
import os
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from nrfjprog_fetch.binding.prober import ProbeFailure
from nrfjprog_fetch.core.platform import PlatformConfig

logger = logging.getLogger(__name__)

# The binding was built but the vendor shared library could not be found
LIBRARY_MISSING_ERRNO = 2
LIBRARY_MISSING_ERRCODE = "CouldNotFindJprogDLL"

# The binding itself has not been built yet
BINDINGS_MISSING_PATTERN = re.compile(r"^Could not locate the bindings file")


class FailureKind(Enum):
    """Kinds of probe failure."""

    HEADERS_PRESENT = "headers_present"
    LIBRARY_MISSING = "library_missing"
    BINDINGS_MISSING = "bindings_missing"
    UNRELATED = "unrelated"


@dataclass(frozen=True)
class Classification:
    """A classified probe failure."""

    kind: FailureKind
    failure: ProbeFailure

    @property
    def fixable_by_fetch(self) -> bool:
        return self.kind in (FailureKind.LIBRARY_MISSING, FailureKind.BINDINGS_MISSING)

    @property
    def reprobe_after_fetch(self) -> bool:
        # After a first install the binding still needs compiling, so
        # probing again would fail for reasons a fetch cannot fix.
        return self.kind is FailureKind.LIBRARY_MISSING


def classify_failure(
    failure: ProbeFailure,
    config: PlatformConfig,
    exists: Callable[[str], bool] = os.path.exists,
) -> Classification:
    """
    Classify a probe failure.

    Checked in order:
    1. The platform has a header override and the vendor header exists:
       the tools are installed system-wide, nothing to fetch.
    2. errno/errcode identify a missing nrfjprog shared library.
    3. The message says the bindings file could not be located.
    4. Anything else is unrelated to the nrfjprog libraries.

    Args:
        failure: Failure returned by the prober
        config: Selected platform configuration
        exists: Predicate used to test for the override header

    Returns:
        Classification of the failure
    """
    if config.header_override is not None and exists(str(config.header_override)):
        logger.debug(f"Found {config.header_override}, assuming nrfjprog is installed")
        kind = FailureKind.HEADERS_PRESENT
    elif (
        failure.errno == LIBRARY_MISSING_ERRNO
        and failure.errcode == LIBRARY_MISSING_ERRCODE
    ):
        kind = FailureKind.LIBRARY_MISSING
    elif BINDINGS_MISSING_PATTERN.match(failure.message):
        kind = FailureKind.BINDINGS_MISSING
    else:
        kind = FailureKind.UNRELATED

    return Classification(kind=kind, failure=failure)
