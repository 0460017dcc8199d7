"""
TaskForge - AI task orchestration core.

Example:
    >>> from taskforge.domains.orchestration import create_orchestrator
    >>> async with await create_orchestrator() as orchestrator:
    ...     result = await orchestrator.process({"type": "summarization", "input": "..."})
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
