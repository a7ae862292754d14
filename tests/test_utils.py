"""Unit tests for sqlscaffold.utils.

Tests cover:
- Identifier splitting and case conversion
- Rich output helpers
- Logging setup
"""

from __future__ import annotations

import logging
from unittest.mock import patch

import pytest

from sqlscaffold.utils import (
    lower_first,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
    setup_logging,
    split_words,
    to_camel_case,
    to_kebab_case,
    to_pascal_case,
    to_snake_case,
)

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Name helpers
# ---------------------------------------------------------------------------


class TestSplitWords:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("serverNameExample", ["server", "Name", "Example"]),
            ("order_item", ["order", "item"]),
            ("user-service", ["user", "service"]),
            ("HTTPServer", ["HTTP", "Server"]),
            ("", []),
        ],
    )
    def test_split(self, name, expected):
        assert split_words(name) == expected


class TestCaseConversion:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("serverNameExample", "server-name-example"),
            ("order_svc", "order-svc"),
            ("ShopProject", "shop-project"),
            ("shop", "shop"),
        ],
    )
    def test_kebab(self, name, expected):
        assert to_kebab_case(name) == expected

    def test_snake(self):
        assert to_snake_case("OrderItem") == "order_item"
        assert to_snake_case("order-item") == "order_item"

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("order", "Order"),
            ("order_item", "OrderItem"),
            ("user_id", "UserID"),
            ("api_url", "APIURL"),
            ("userExample", "UserExample"),
        ],
    )
    def test_pascal(self, name, expected):
        assert to_pascal_case(name) == expected

    def test_camel(self):
        assert to_camel_case("order_item") == "orderItem"
        assert to_camel_case("paid_at") == "paidAt"
        assert to_camel_case("") == ""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("UserExample", "userExample"),
            ("APIKey", "apiKey"),
            ("UserID", "userID"),
            ("ID", "id"),
            ("HTTPServer", "httpServer"),
            ("API2Key", "api2Key"),
            ("order", "order"),
            ("A", "a"),
            ("", ""),
        ],
    )
    def test_lower_first(self, name, expected):
        assert lower_first(name) == expected


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------


class TestOutputHelpers:
    def test_messages_use_console(self):
        with patch("sqlscaffold.utils.console") as mock_console:
            print_success("done")
            print_error("failed")
            print_warning("careful")
        printed = [c.args[0] for c in mock_console.print.call_args_list]
        assert printed == [
            "[bold green]done[/bold green]",
            "[bold red]failed[/bold red]",
            "[bold yellow]careful[/bold yellow]",
        ]

    def test_summary_table(self):
        with patch("sqlscaffold.utils.console") as mock_console:
            print_summary_table({"Output": "/tmp/out"}, title="Generated")
        table = mock_console.print.call_args_list[0].args[0]
        assert table.title == "Generated"
        assert table.row_count == 1


class TestSetupLogging:
    def test_default_level(self):
        setup_logging()
        log = logging.getLogger("sqlscaffold")
        assert log.level == logging.WARNING
        assert len(log.handlers) == 1
        assert log.propagate is False

    def test_verbose_level(self):
        setup_logging(verbose=True)
        assert logging.getLogger("sqlscaffold").level == logging.DEBUG

    def test_repeated_setup_keeps_one_handler(self):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger("sqlscaffold").handlers) == 1
