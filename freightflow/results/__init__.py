"""Result containers exposed to rendering and reporting collaborators."""

from freightflow.results.snapshot import (
    EdgeReport,
    NetworkSnapshot,
    NetworkStats,
    build_snapshot,
)

__all__ = ["EdgeReport", "NetworkSnapshot", "NetworkStats", "build_snapshot"]
