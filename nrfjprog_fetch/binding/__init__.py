"""
Native binding probe and failure classification.
"""

from nrfjprog_fetch.binding.prober import (
    DEFAULT_BINDING_MODULE,
    CapabilityProber,
    ProbeFailure,
    ProbeResult,
    load_binding,
)
from nrfjprog_fetch.binding.classifier import (
    Classification,
    FailureKind,
    classify_failure,
)

__all__ = [
    "DEFAULT_BINDING_MODULE",
    "CapabilityProber",
    "Classification",
    "FailureKind",
    "ProbeFailure",
    "ProbeResult",
    "classify_failure",
    "load_binding",
]
