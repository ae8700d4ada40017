from .coordinator import PushResult, SyncCoordinator
from .deletion import DeletionState, DeletionWorkflow
from .lifetime import Lifetime
from .ordering import PlanOrderingEngine
from .projection import SECTION_KEY, LivePlanProjection

__all__ = [
    "DeletionState",
    "DeletionWorkflow",
    "Lifetime",
    "LivePlanProjection",
    "PlanOrderingEngine",
    "PushResult",
    "SECTION_KEY",
    "SyncCoordinator",
]
