"""Core functionality for bedrock_updater.

This module provides the update pipeline and its building blocks:
- Configuration management
- Version parsing and ordering
- Download link extraction
- Merge installation
"""

from bedrock_updater.core.config import UpdaterConfig
from bedrock_updater.core.errors import ErrorKind, UpdaterError
from bedrock_updater.core.installer import MergeInstaller
from bedrock_updater.core.links import LinkExtractor, parse_document
from bedrock_updater.core.pipeline import CycleReport, UpdatePipeline
from bedrock_updater.core.types import DownloadReference, Platform, PipelineState
from bedrock_updater.core.version import Ordering, VersionString, compare

__all__ = [
    # Config
    "UpdaterConfig",
    # Types
    "DownloadReference",
    "Platform",
    "PipelineState",
    "VersionString",
    "Ordering",
    "compare",
    # Errors
    "ErrorKind",
    "UpdaterError",
    # Pipeline
    "LinkExtractor",
    "parse_document",
    "MergeInstaller",
    "UpdatePipeline",
    "CycleReport",
]
