"""Bedrock Updater - keeps a Minecraft Bedrock dedicated server up to date.

The updater scrapes the vendor download page for the latest server archive,
compares its version with the installed one and merges newer releases into
the live server directory without touching operator configuration.

Key modules:
- core: Update pipeline (config, versions, link extraction, installation)
- commands: CLI command implementations
"""

__version__ = "0.1.0"
__author__ = "Bedrock Updater Team"

# Re-export commonly used types
from bedrock_updater.core.config import UpdaterConfig
from bedrock_updater.core.pipeline import UpdatePipeline
from bedrock_updater.core.types import Platform
from bedrock_updater.core.version import VersionString

__all__ = [
    "__version__",
    "__author__",
    "Platform",
    "UpdaterConfig",
    "UpdatePipeline",
    "VersionString",
]
