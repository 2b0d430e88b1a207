"""Unit tests for identifier case conversion."""

from __future__ import annotations

import pytest

from arango_plugin.kernel.text import lower_camelize, lower_first, underline_case, upper_camelize, upper_first


class TestUnderlineCase:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("testTest", "test_test"),
            ("TestTest", "test_test"),
            ("UserToRole", "user_to_role"),
            ("user", "user"),
            ("", ""),
        ],
    )
    def test_conversion(self, text: str, expected: str) -> None:
        assert underline_case(text) == expected


class TestCamelize:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("test-test", "testTest"),
            ("test_test", "testTest"),
            ("user2role", "user2Role"),
            ("Static_data", "staticData"),
        ],
    )
    def test_lower(self, text: str, expected: str) -> None:
        assert lower_camelize(text) == expected

    def test_upper(self) -> None:
        assert upper_camelize("user_to_role") == "UserToRole"

    def test_first_letter(self) -> None:
        assert lower_first("User") == "user"
        assert upper_first("user") == "User"
        assert lower_first("") == ""
