"""Unit tests for module data storage keys."""
import pytest

from agents_arena.models.module_data import module_data_key
from agents_arena.models.module_data import parse_module_data_key


class TestModuleDataKey:
    """Tests for module_data_key and parse_module_data_key."""

    @pytest.mark.unit
    def test_key_layout(self) -> None:
        assert module_data_key("u-42", "agents-arena") == "user:u-42:module:agents-arena"

    @pytest.mark.unit
    def test_parse_round_trip(self) -> None:
        key = module_data_key("user@example.com", "agents-arena")

        assert parse_module_data_key(key) == ("user@example.com", "agents-arena")

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "key",
        [
            "",
            "agents-arena",
            "user::module:agents-arena",
            "user:u-42:module:",
            "account:u-42:module:agents-arena",
        ],
    )
    def test_malformed_keys_rejected(self, key: str) -> None:
        with pytest.raises(ValueError, match="Malformed module data key"):
            parse_module_data_key(key)
