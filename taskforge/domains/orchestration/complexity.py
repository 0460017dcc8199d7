"""
Complexity Analysis - Heuristic task complexity scoring.
"""

from __future__ import annotations

from taskforge.domains.tasks import Complexity, Task, TaskType

__all__ = ["analyze_complexity", "complexity_score"]

REASONING_TYPES = frozenset({TaskType.ANALYSIS, TaskType.PREDICTION, TaskType.PLANNING})

LONG_INPUT_CHARS = 1000
VERY_LONG_INPUT_CHARS = 5000


def complexity_score(task: Task) -> int:
    """Additive score: long input, very long input, attachments, reasoning type."""
    score = 0
    length = len(task.input)
    if length > LONG_INPUT_CHARS:
        score += 2
    if length > VERY_LONG_INPUT_CHARS:
        score += 3
    if task.attachments:
        score += 2
    if task.type in REASONING_TYPES:
        score += 3
    return score


def analyze_complexity(task: Task) -> Complexity:
    score = complexity_score(task)
    if score <= 3:
        return Complexity.LOW
    if score <= 6:
        return Complexity.MEDIUM
    return Complexity.HIGH
