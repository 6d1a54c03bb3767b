"""Parsing of comment dialog results.

The comment dialog posts back the fields the user filled in as JSON, either an
object mapping field names to values or a list of ``{"name", "value"}`` pairs.
"""

from __future__ import annotations

import json
from typing import Any

from litestar_workflow_commands.core.types import CommentFields
from litestar_workflow_commands.exceptions import MalformedDialogResultError

__all__ = ["parse_comment_fields"]


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)


def parse_comment_fields(result: str) -> CommentFields:
    """Parse serialized comment fields into a field name to value mapping.

    Args:
        result: The raw dialog result.

    Returns:
        The comment fields. Non-string values are serialized back to JSON.

    Raises:
        MalformedDialogResultError: If the result is not a JSON object or a
            list of name/value pairs.

    Example:
        >>> parse_comment_fields('{"Comments": "Looks good"}')
        {'Comments': 'Looks good'}
        >>> parse_comment_fields('[{"name": "Comments", "value": "Approved"}]')
        {'Comments': 'Approved'}
    """
    try:
        data = json.loads(result)
    except (TypeError, ValueError) as e:
        raise MalformedDialogResultError(result, "not valid JSON") from e

    if isinstance(data, dict):
        return {str(name): _as_text(value) for name, value in data.items()}

    if isinstance(data, list):
        fields: CommentFields = {}
        for entry in data:
            if not isinstance(entry, dict) or "name" not in entry:
                raise MalformedDialogResultError(result, "expected a list of name/value pairs")
            fields[str(entry["name"])] = _as_text(entry.get("value"))
        return fields

    raise MalformedDialogResultError(result, f"unexpected {type(data).__name__}")
