"""
Domains - Orchestration core.

Each domain is self-contained with:
- contracts.py: Interfaces (Protocol classes)
- models.py: Pydantic data models
- Implementation files
- test_*.py modules beside the code
"""

__all__ = [
    "tasks",
    "registry",
    "cache",
    "queue",
    "monitoring",
    "orchestration",
]
