"""CLI command implementations for bedrock_updater.

This module contains all command-line interface implementations:
- run: Poll the download page and install newer server releases
- check: Show the installed and latest versions without installing
"""

from bedrock_updater.commands.update import check, run

__all__ = ["check", "run"]
