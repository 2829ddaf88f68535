"""Tests for environment-driven settings."""

from pathlib import Path

import pytest

from pos.domain.exceptions import ValidationError
from pos.infrastructure.bootstrap import load_settings


class TestLoadSettings:

    def test_defaults(self):
        settings = load_settings({})
        assert settings.cashier_id == 1
        assert settings.test_mode is False
        assert settings.store_path.name == "pos.json"

    def test_overrides(self, tmp_path):
        settings = load_settings(
            {"POS_DATA_DIR": str(tmp_path), "POS_CASHIER_ID": "42", "POS_TEST_MODE": "True"}
        )
        assert settings.data_dir == Path(tmp_path)
        assert settings.store_path == tmp_path / "pos.json"
        assert settings.cashier_id == 42
        assert settings.test_mode is True

    @pytest.mark.parametrize("flag", ["0", "no", ""])
    def test_test_mode_off(self, flag):
        assert load_settings({"POS_TEST_MODE": flag}).test_mode is False

    def test_bad_cashier_id(self):
        with pytest.raises(ValidationError, match="POS_CASHIER_ID"):
            load_settings({"POS_CASHIER_ID": "anna"})
