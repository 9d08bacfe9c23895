"""
Fetch-and-install pipeline.

The pipeline is an ordered list of named steps built from the selected
PlatformConfig. Steps run in sequence; the first one that raises aborts the
rest. Nothing is rolled back: a partial download or extraction stays on disk
for the next run to overwrite.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from nrfjprog_fetch.core.download import download_file, log_progress
from nrfjprog_fetch.core.filesystem import ensure_directory, extract_tar_stream
from nrfjprog_fetch.core.launcher import open_with_default_handler
from nrfjprog_fetch.core.platform import PlatformConfig
from nrfjprog_fetch.installer.copier import CopyResult, install_files

logger = logging.getLogger(__name__)


@dataclass
class PipelineStep:
    """A named pipeline step."""

    name: str
    action: Callable[[], None]


@dataclass
class PipelineResult:
    """What a pipeline run did."""

    completed_steps: List[str] = field(default_factory=list)
    downloaded: Optional[Path] = None
    copied: Optional[CopyResult] = None
    launched_installer: Optional[Path] = None


class FetchPipeline:
    """Download nrfjprog and put its files in place for one platform."""

    def __init__(
        self,
        config: PlatformConfig,
        downloader: Callable = download_file,
        extractor: Callable = extract_tar_stream,
        copier: Callable = install_files,
        launcher: Callable = open_with_default_handler,
    ):
        """
        Initialize the pipeline.

        Args:
            config: Selected platform configuration
            downloader: Callable(url, destination, progress_callback=...)
            extractor: Callable(archive_path, destination)
            copier: Callable(copy_rule) returning a CopyResult
            launcher: Callable(path, platform_id) starting an installer detached
        """
        self.config = config
        self.downloader = downloader
        self.extractor = extractor
        self.copier = copier
        self.launcher = launcher
        self.result = PipelineResult()

    def steps(self) -> List[PipelineStep]:
        """
        Build the ordered step list for the configured platform.

        Returns:
            Steps to run, optional ones included only when configured
        """
        steps = [
            PipelineStep("create-directory", self._create_directory),
            PipelineStep("download", self._download),
        ]
        if self.config.extract_to is not None:
            steps.append(PipelineStep("extract", self._extract))
        if self.config.copy_files is not None:
            steps.append(PipelineStep("copy", self._copy))
        if self.config.spawn_child is not None:
            steps.append(PipelineStep("launch-installer", self._launch))
        return steps

    def run(self) -> PipelineResult:
        """
        Run every step in order.

        Returns:
            PipelineResult describing the completed steps

        Raises:
            PipelineError: From the first step that fails
        """
        self.result = PipelineResult()
        for step in self.steps():
            logger.debug(f"Pipeline step: {step.name}")
            step.action()
            self.result.completed_steps.append(step.name)
        return self.result

    def _create_directory(self) -> None:
        ensure_directory(self.config.download_dir)

    def _download(self) -> None:
        logger.info(
            f"Downloading nrfjprog from {self.config.url} "
            f"to {self.config.destination_file}"
        )
        self.result.downloaded = self.downloader(
            self.config.url,
            self.config.destination_file,
            progress_callback=log_progress,
        )

    def _extract(self) -> None:
        ensure_directory(self.config.extract_to)
        self.extractor(self.config.destination_file, self.config.extract_to)

    def _copy(self) -> None:
        self.result.copied = self.copier(self.config.copy_files)

    def _launch(self) -> None:
        logger.info(
            f"Installation of nrfjprog requires running {self.config.spawn_child}"
        )
        # Detached: the installer's completion is never observed
        self.launcher(self.config.spawn_child, self.config.platform_id)
        self.result.launched_installer = self.config.spawn_child
