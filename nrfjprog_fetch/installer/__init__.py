"""
Fetch-and-install pipeline, file installation and post-install verification.
"""

from nrfjprog_fetch.installer.copier import CopyResult, install_files, partition_files
from nrfjprog_fetch.installer.pipeline import (
    FetchPipeline,
    PipelineResult,
    PipelineStep,
)
from nrfjprog_fetch.installer.verifier import verify_installation

__all__ = [
    "CopyResult",
    "FetchPipeline",
    "PipelineResult",
    "PipelineStep",
    "install_files",
    "partition_files",
    "verify_installation",
]
