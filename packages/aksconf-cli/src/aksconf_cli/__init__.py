"""aksconf-cli: Command-line interface for aksconf.

Commands:
- aksconf validate: Validate a cluster configuration document
- aksconf normalize: Print the canonical, defaults-applied configuration
- aksconf schema export: Export the ClusterConfig JSON Schema
"""

from __future__ import annotations

__version__ = "0.1.0"
