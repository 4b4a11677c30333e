"""jps-scala-cli: Developer command line for the Scala builder."""

from __future__ import annotations

__version__ = "0.1.0"
