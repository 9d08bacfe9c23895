"""
Probe-and-recover orchestration.

ensure_library() is the whole flow for one run: probe the nrfjprog binding,
classify a failure, run the fetch pipeline when the failure is fixable, and
re-probe when the fetched files should take effect right away.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from nrfjprog_fetch.binding.classifier import (
    Classification,
    FailureKind,
    classify_failure,
)
from nrfjprog_fetch.binding.prober import CapabilityProber
from nrfjprog_fetch.core.platform import PlatformConfig
from nrfjprog_fetch.installer.pipeline import FetchPipeline
from nrfjprog_fetch.installer.verifier import verify_installation

logger = logging.getLogger(__name__)


class Outcome(Enum):
    """How a run ended."""

    ALREADY_SATISFIED = "already_satisfied"
    HEADERS_PRESENT = "headers_present"
    INSTALLED = "installed"
    VERIFIED = "verified"
    INSTALLER_LAUNCHED = "installer_launched"
    INSTRUCTIONS_SHOWN = "instructions_shown"
    UNRELATED_FAILURE = "unrelated_failure"
    FAILED = "failed"

    @property
    def succeeded(self) -> bool:
        return self not in (Outcome.UNRELATED_FAILURE, Outcome.FAILED)


@dataclass
class FetchReport:
    """Result of ensure_library()."""

    outcome: Outcome
    version: Optional[str] = None
    error: Optional[str] = None
    classification: Optional[Classification] = None


def ensure_library(
    config: PlatformConfig,
    prober: CapabilityProber,
    pipeline_factory: Callable[[PlatformConfig], FetchPipeline] = FetchPipeline,
    exists: Callable[[str], bool] = os.path.exists,
) -> FetchReport:
    """
    Make sure the nrfjprog library can be used, fetching it if needed.

    Pipeline and re-probe failures are caught here and reported in the
    returned FetchReport; they never propagate.

    Args:
        config: Selected platform configuration
        prober: Capability prober for the binding
        pipeline_factory: Builds the fetch pipeline for config
        exists: Predicate used for the header override check

    Returns:
        FetchReport describing the outcome
    """
    result = prober.probe()
    if result.ok:
        logger.info(
            f"nrfjprog libraries at version {result.version}, no need to fetch them"
        )
        return FetchReport(Outcome.ALREADY_SATISFIED, version=result.version)

    classification = classify_failure(result.failure, config, exists=exists)

    if classification.kind is FailureKind.HEADERS_PRESENT:
        logger.info("nrfjprog headers found in the system install, not fetching")
        return FetchReport(Outcome.HEADERS_PRESENT, classification=classification)

    if classification.kind is FailureKind.UNRELATED:
        # Only nrfjprog library problems are fixable here, not e.g. J-Link ones
        logger.error(f"nrfjprog binding failed: {result.failure.message}")
        return FetchReport(
            Outcome.UNRELATED_FAILURE,
            error=result.failure.message,
            classification=classification,
        )

    logger.info("nrf-jprog libraries seem to be missing.")

    try:
        pipeline_result = pipeline_factory(config).run()

        if pipeline_result.launched_installer is not None:
            return FetchReport(
                Outcome.INSTALLER_LAUNCHED, classification=classification
            )

        if config.instructions:
            print(config.instructions)
            return FetchReport(
                Outcome.INSTRUCTIONS_SHOWN, classification=classification
            )

        if classification.reprobe_after_fetch:
            version = verify_installation(prober)
            return FetchReport(
                Outcome.VERIFIED, version=version, classification=classification
            )
    except Exception as e:
        logger.error(f"Error when getting nrfjprog: {e}")
        return FetchReport(Outcome.FAILED, error=str(e), classification=classification)

    return FetchReport(Outcome.INSTALLED, classification=classification)
