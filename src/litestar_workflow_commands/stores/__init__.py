"""Item store implementations."""

from __future__ import annotations

from litestar_workflow_commands.stores.memory import InMemoryItemStore, WorkflowHistoryEntry

__all__ = ["InMemoryItemStore", "WorkflowHistoryEntry"]
