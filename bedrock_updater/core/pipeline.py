"""Update pipeline run once per poll cycle.

A cycle moves through::

    IDLE -> DOCUMENT_FETCHED -> LINK_RESOLVED -> VERSIONS_RESOLVED
         -> UP_TO_DATE | AHEAD_OF_REMOTE | UPDATING -> IDLE

Nothing is carried between cycles except the version record on disk.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

import structlog

from bedrock_updater.core.config import UpdaterConfig
from bedrock_updater.core.errors import InstallDirMissing
from bedrock_updater.core.installer import MergeInstaller
from bedrock_updater.core.links import LinkExtractor, parse_document
from bedrock_updater.core.record import VersionRecord
from bedrock_updater.core.resolver import ResolvedVersions, resolve
from bedrock_updater.core.types import DownloadReference, PipelineState
from bedrock_updater.core.version import Ordering


class PageSource(Protocol):
    """Transport used by the pipeline."""

    def fetch_page(self, url: str) -> str: ...

    def download(self, url: str) -> bytes: ...


@dataclass(frozen=True)
class CycleReport:
    """Outcome of one completed update cycle."""

    outcome: PipelineState
    reference: DownloadReference
    versions: ResolvedVersions

    @property
    def updated(self) -> bool:
        return self.outcome is PipelineState.UPDATING


class UpdatePipeline:
    """Checks the download page and installs newer server releases.

    Args:
        config: Updater configuration
        server_dir: Live server installation directory
        source: Page and archive transport
        installer: Merge installer, built from the config blacklist if None
        log: Bound logger, defaults to ``structlog.get_logger()``
    """

    def __init__(
        self,
        config: UpdaterConfig,
        server_dir: Path,
        source: PageSource,
        installer: MergeInstaller | None = None,
        log: Any = None,
    ) -> None:
        self.config = config
        self.server_dir = server_dir
        self.source = source
        self.log = log or structlog.get_logger()
        self.installer = installer or MergeInstaller(config.blacklist, log=self.log)
        self.extractor = LinkExtractor(config.download_selector)
        self.record = VersionRecord(config.version_path(server_dir))
        self.staging_dir = config.staging_path(server_dir)
        self.state = PipelineState.IDLE
        # States entered during the most recent cycle
        self.visited: list[PipelineState] = []

    def _enter(self, state: PipelineState) -> None:
        self.log.debug("pipeline_state", state=state.value)
        self.state = state
        self.visited.append(state)

    @property
    def versions_resolved(self) -> bool:
        """True once the most recent cycle resolved both versions."""
        return PipelineState.VERSIONS_RESOLVED in self.visited

    def check(self, override: str | None = None) -> tuple[DownloadReference, ResolvedVersions]:
        """Resolve the download reference and both versions.

        Args:
            override: Operator supplied current version, written to the record

        Returns:
            Download reference and resolved versions
        """
        self.visited = []
        if not self.server_dir.is_dir():
            raise InstallDirMissing(self.server_dir)

        html = self.source.fetch_page(self.config.page_url)
        document = parse_document(html)
        self._enter(PipelineState.DOCUMENT_FETCHED)

        reference = self.extractor.extract(document)
        self._enter(PipelineState.LINK_RESOLVED)

        versions = resolve(reference.file_name, self.record.read(), override, self.record)
        self._enter(PipelineState.VERSIONS_RESOLVED)
        return reference, versions

    def run_cycle(self, override: str | None = None) -> CycleReport:
        """Run one full update cycle.

        Args:
            override: Operator supplied current version

        Returns:
            Report naming the terminal state reached

        Raises:
            UpdaterError: Any failure, tagged with its kind
        """
        try:
            reference, versions = self.check(override)
            outcome = self._decide(reference, versions)
            return CycleReport(outcome=outcome, reference=reference, versions=versions)
        finally:
            self._enter(PipelineState.IDLE)

    def _decide(self, reference: DownloadReference, versions: ResolvedVersions) -> PipelineState:
        log = self.log.bind(phase="version_check")
        log.info("Found server version", version=str(versions.current))
        log.info("Found latest version", version=str(versions.latest))

        ordering = versions.ordering
        if ordering is Ordering.EQUAL:
            log.info("Server is up to date")
            self._enter(PipelineState.UP_TO_DATE)
            return PipelineState.UP_TO_DATE

        if ordering is Ordering.GREATER:
            # Never downgrade; this is most likely a preview build
            log.info(
                "Server is most likely a preview version, make sure you set the correct version"
            )
            self._enter(PipelineState.AHEAD_OF_REMOTE)
            return PipelineState.AHEAD_OF_REMOTE

        log.info("Server is not up to date")
        self._enter(PipelineState.UPDATING)
        archive = self.source.download(reference.url)
        self.installer.install(
            archive,
            self.server_dir,
            self.staging_dir,
            self.record,
            versions.latest,
        )
        return PipelineState.UPDATING
