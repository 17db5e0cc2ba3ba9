"""CLI command modules.

Commands are loaded lazily by aar_transform.cli.main.LAZY_COMMANDS.
"""

from __future__ import annotations

__all__: list[str] = []
