"""
Orchestration Domain - End-to-end task processing.

This domain handles:
- Context enrichment
- Cache reuse gating
- Complexity analysis and model selection
- Queued execution and metric recording
"""

from .complexity import analyze_complexity, complexity_score
from .context import OrchestratorContext
from .contracts import BusinessContextProvider, PreferenceStore, TaskProcessor
from .factory import create_orchestrator
from .models import ResultEnvelope, ResultMetadata, SystemHealth
from .orchestrator import Orchestrator

__all__ = [
    # Contracts
    "BusinessContextProvider",
    "PreferenceStore",
    "TaskProcessor",
    # Models
    "ResultEnvelope",
    "ResultMetadata",
    "SystemHealth",
    # Implementations
    "Orchestrator",
    "OrchestratorContext",
    "create_orchestrator",
    "analyze_complexity",
    "complexity_score",
]
