"""Tests for comment dialog result parsing."""

from __future__ import annotations

import pytest

from litestar_workflow_commands.comments import parse_comment_fields
from litestar_workflow_commands.exceptions import MalformedDialogResultError


@pytest.mark.unit
class TestParseCommentFields:
    """Tests for parse_comment_fields."""

    def test_object(self) -> None:
        """A JSON object maps field names to values."""
        assert parse_comment_fields('{"Comments": "Looks good", "Reviewer": "ana"}') == {
            "Comments": "Looks good",
            "Reviewer": "ana",
        }

    def test_pairs(self) -> None:
        """A list of name/value pairs is accepted."""
        result = '[{"name": "Comments", "value": "Approved"}, {"name": "Ticket"}]'

        assert parse_comment_fields(result) == {"Comments": "Approved", "Ticket": ""}

    def test_non_string_values(self) -> None:
        """Non-string values are serialized as JSON text."""
        assert parse_comment_fields('{"Urgent": true, "Count": 2, "Note": null}') == {
            "Urgent": "true",
            "Count": "2",
            "Note": "",
        }

    def test_empty_object(self) -> None:
        """An empty object yields no fields."""
        assert parse_comment_fields("{}") == {}

    @pytest.mark.parametrize("result", ["not json", '"just text"', "42", '[{"value": "x"}]', '["x"]'])
    def test_malformed(self, result: str) -> None:
        """Anything but an object or name/value pairs is rejected."""
        with pytest.raises(MalformedDialogResultError) as exc_info:
            parse_comment_fields(result)

        assert exc_info.value.result == result
