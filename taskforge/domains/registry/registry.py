"""
Model Registry - Catalog of processing implementations with multi-criteria selection.

Selection filters candidates by hard constraints (availability, latency,
quality) and ranks the survivors with a weighted composite score.
"""

from __future__ import annotations

import logging
from typing import Any

from taskforge.config import NoCandidateError, RegistrationError
from taskforge.domains.tasks import CostConstraint, TaskType

from .contracts import ModelPlugin
from .models import DuplicatePolicy, ModelType, ScoredModel, SelectionCriteria

logger = logging.getLogger(__name__)

__all__ = ["ModelRegistry", "capability_for"]

# Task type -> capability a model must advertise to be a direct candidate
TASK_CAPABILITIES: dict[TaskType, str] = {
    TaskType.ANALYSIS: "analysis",
    TaskType.GENERATION: "generation",
    TaskType.SUMMARIZATION: "summarization",
    TaskType.TRANSLATION: "translation",
    TaskType.CLASSIFICATION: "classification",
    TaskType.PREDICTION: "prediction",
    TaskType.PLANNING: "planning",
    TaskType.OPTIMIZATION: "analysis",
    TaskType.AUTOMATION: "generation",
    TaskType.REPORTING: "analysis",
    TaskType.SUPPORT: "generation",
    TaskType.SEARCH: "classification",
}
DEFAULT_CAPABILITY = "text"

# Cost per token above which the cost score drops to zero
COST_THRESHOLDS: dict[CostConstraint, float] = {
    CostConstraint.LOW: 0.0002,
    CostConstraint.MEDIUM: 0.0005,
    CostConstraint.HIGH: 0.001,
}

QUALITY_WEIGHT = 40.0
LATENCY_WEIGHT = 30.0
COST_WEIGHT = 20.0
SPECIALIZATION_WEIGHT = 10.0


def capability_for(task_type: TaskType | str) -> str:
    """Map a task type to the capability used for candidate lookup."""
    try:
        return TASK_CAPABILITIES[TaskType(task_type)]
    except ValueError:
        return DEFAULT_CAPABILITY


class ModelRegistry:
    """
    In-memory model catalog.

    Features:
    - Indexes by model type and by capability
    - Hard-constraint filtering with general-model fallback
    - Weighted composite scoring (quality 40, latency 30, cost 20, specialization 10)
    - Explicit duplicate-name policy
    """

    def __init__(self, duplicate_policy: DuplicatePolicy = DuplicatePolicy.REPLACE) -> None:
        """
        Initialize registry.

        Args:
            duplicate_policy: Behaviour when a name is registered twice
        """
        self._models: dict[str, ModelPlugin] = {}
        self._type_index: dict[ModelType, list[str]] = {}
        self._capability_index: dict[str, list[str]] = {}
        self._duplicate_policy = duplicate_policy

    async def register(self, model: ModelPlugin) -> None:
        """Add a model and index it by type and capabilities."""
        spec = model.spec
        if not spec.capabilities:
            raise RegistrationError(
                f"Model {spec.name} declares no capabilities",
                {"model": spec.name},
            )

        if spec.name in self._models:
            if self._duplicate_policy == DuplicatePolicy.REJECT:
                raise RegistrationError(
                    f"Model already registered: {spec.name}",
                    {"model": spec.name},
                )
            logger.warning("Model %s re-registered, replacing previous entry", spec.name)
            self._remove_from_indexes(self._models[spec.name])

        self._models[spec.name] = model
        self._type_index.setdefault(spec.type, []).append(spec.name)
        for capability in spec.capabilities:
            self._capability_index.setdefault(capability, []).append(spec.name)

        logger.info("Model registered: %s (%s)", spec.name, spec.type.value)

    def unregister(self, name: str) -> bool:
        """Remove a model. Returns False if it was not registered."""
        model = self._models.pop(name, None)
        if model is None:
            return False

        self._remove_from_indexes(model)
        logger.info("Model unregistered: %s", name)
        return True

    async def select_best(self, criteria: SelectionCriteria) -> ModelPlugin:
        """Return the highest scoring model meeting the hard constraints."""
        ranked = self.rank(criteria)
        if not ranked:
            raise NoCandidateError(
                f"No suitable model found for task type {criteria.task_type.value}",
                {"criteria": criteria.model_dump(mode="json")},
            )

        best = ranked[0]
        logger.info("Selected model: %s (score: %.2f)", best.name, best.score)
        return self._models[best.name]

    def rank(self, criteria: SelectionCriteria) -> list[ScoredModel]:
        """Score every candidate, best first. Ties keep registration order."""
        scored = [self.score(model, criteria) for model in self._find_candidates(criteria)]
        # sorted() is stable, so equal scores stay in candidate order
        return sorted(scored, key=lambda s: s.score, reverse=True)

    def score(self, model: ModelPlugin, criteria: SelectionCriteria) -> ScoredModel:
        """Compute the composite score breakdown for one model."""
        spec = model.spec
        capability = capability_for(criteria.task_type)

        if criteria.quality_requirement > 0:
            quality = min(spec.quality_score / criteria.quality_requirement, 1.0)
        else:
            quality = 1.0
        latency = max(0.0, 1.0 - spec.avg_latency_ms / criteria.latency_requirement_ms)
        threshold = COST_THRESHOLDS[criteria.cost_constraint]
        cost = max(0.0, 1.0 - spec.cost_per_token / threshold)

        if capability in spec.capabilities:
            specialization = 0.7 if spec.type == ModelType.GENERAL else 1.0
        else:
            specialization = 0.5

        total = (
            quality * QUALITY_WEIGHT
            + latency * LATENCY_WEIGHT
            + cost * COST_WEIGHT
            + specialization * SPECIALIZATION_WEIGHT
        )
        return ScoredModel(
            name=spec.name,
            score=total,
            quality=quality,
            latency=latency,
            cost=cost,
            specialization=specialization,
        )

    def get(self, name: str) -> ModelPlugin | None:
        """Get a model by name."""
        return self._models.get(name)

    def get_available(self) -> list[ModelPlugin]:
        """List models currently marked available."""
        return [m for m in self._models.values() if m.spec.is_available]

    def get_health(self) -> dict[str, Any]:
        """Registry bookkeeping for health endpoints."""
        specs = [m.spec for m in self._models.values()]
        count = len(specs)
        return {
            "total": count,
            "available": sum(1 for s in specs if s.is_available),
            "types": {t.value: list(names) for t, names in self._type_index.items() if names},
            "avg_quality": sum(s.quality_score for s in specs) / count if count else 0.0,
            "avg_latency_ms": sum(s.avg_latency_ms for s in specs) / count if count else 0.0,
        }

    def _find_candidates(self, criteria: SelectionCriteria) -> list[ModelPlugin]:
        """Capability matches first, general models as fallback."""
        capability = capability_for(criteria.task_type)
        candidates = [
            self._models[name]
            for name in self._capability_index.get(capability, [])
            if self._meets_requirements(self._models[name], criteria)
        ]

        if not candidates:
            candidates = [
                self._models[name]
                for name in self._type_index.get(ModelType.GENERAL, [])
                if self._meets_requirements(self._models[name], criteria)
            ]
            if candidates:
                logger.debug(
                    "No %s-capable model, falling back to %d general model(s)",
                    capability,
                    len(candidates),
                )

        return candidates

    @staticmethod
    def _meets_requirements(model: ModelPlugin, criteria: SelectionCriteria) -> bool:
        spec = model.spec
        return (
            spec.is_available
            and spec.avg_latency_ms <= criteria.latency_requirement_ms
            and spec.quality_score >= criteria.quality_requirement
        )

    def _remove_from_indexes(self, model: ModelPlugin) -> None:
        spec = model.spec
        type_names = self._type_index.get(spec.type, [])
        if spec.name in type_names:
            type_names.remove(spec.name)
        for capability in spec.capabilities:
            names = self._capability_index.get(capability, [])
            if spec.name in names:
                names.remove(spec.name)

    def __len__(self) -> int:
        return len(self._models)

    def __contains__(self, name: object) -> bool:
        return name in self._models
