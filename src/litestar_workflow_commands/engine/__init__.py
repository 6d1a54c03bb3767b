"""Workflow engine implementations.

This module provides engines that apply workflow commands to items and report
completion back to the command.
"""

from __future__ import annotations

from litestar_workflow_commands.engine.local import LocalWorkflowEngine

__all__ = ["LocalWorkflowEngine"]
