"""Exception handling for workflow command web endpoints.

This module maps the library's exceptions onto HTTP responses.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from litestar import Response
from litestar.status_codes import HTTP_400_BAD_REQUEST, HTTP_404_NOT_FOUND

from litestar_workflow_commands.exceptions import (
    ItemNotFoundError,
    MalformedDialogResultError,
    OperationAlreadyFinishedError,
    OperationNotFoundError,
    PreconditionError,
    WorkflowCommandsError,
)

if TYPE_CHECKING:  # pragma: no cover
    from litestar import Request

__all__ = ["workflow_command_error_handler"]


def _error_code(exc: WorkflowCommandsError) -> str:
    if isinstance(exc, OperationNotFoundError):
        return "operation_not_found"
    if isinstance(exc, ItemNotFoundError):
        return "item_not_found"
    if isinstance(exc, OperationAlreadyFinishedError):
        return "operation_finished"
    if isinstance(exc, MalformedDialogResultError):
        return "malformed_dialog_result"
    if isinstance(exc, PreconditionError):
        return "precondition_failed"
    return "workflow_command_error"


def workflow_command_error_handler(
    _request: Request,
    exc: WorkflowCommandsError,
) -> Response:
    """Exception handler for WorkflowCommandsError.

    Unknown operations and items return 404 Not Found; every other library
    error is the caller's fault and returns 400 Bad Request.

    Args:
        request: The Litestar request object.
        exc: The raised exception.

    Returns:
        Response with the error code and message.
    """
    status_code = (
        HTTP_404_NOT_FOUND if isinstance(exc, (OperationNotFoundError, ItemNotFoundError)) else HTTP_400_BAD_REQUEST
    )
    return Response(
        content={"error": _error_code(exc), "message": str(exc)},
        status_code=status_code,
        media_type="application/json",
    )
