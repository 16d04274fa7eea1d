"""Flow assignment engine."""

from freightflow.flow.engine import (
    CycleResult,
    FlowAssignmentEngine,
    PassResult,
    simulate,
)

__all__ = ["FlowAssignmentEngine", "CycleResult", "PassResult", "simulate"]
