"""
Callable Model - Adapt a plain function into a registered model.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from typing import Any

from taskforge.domains.tasks import Task

from .models import ModelSpec

__all__ = ["CallableModel", "Processor"]

Processor = Callable[[Task], "Any | Awaitable[Any]"]


class CallableModel:
    """
    Model plugin backed by a sync or async callable.

    Example:
        >>> spec = ModelSpec(name="echo", capabilities=["text"])
        >>> model = CallableModel(spec, lambda task: task.input)
        >>> await model.process(task)
    """

    def __init__(self, spec: ModelSpec, processor: Processor) -> None:
        self._spec = spec
        self._processor = processor

    @property
    def name(self) -> str:
        return self._spec.name

    @property
    def spec(self) -> ModelSpec:
        return self._spec

    async def process(self, task: Task) -> Any:
        result = self._processor(task)
        if inspect.isawaitable(result):
            result = await result
        return result

    def __repr__(self) -> str:
        return f"CallableModel(name={self._spec.name!r}, type={self._spec.type.value!r})"
