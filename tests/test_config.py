"""
Tests for FSSP configuration.
"""

import argparse

import pytest
from fssp.config import Config
from fssp.symbols import Symbol, color_set


class TestConfig:
    """Tests for Config dataclass."""

    def test_defaults(self):
        """Config initializes with the reference-run defaults."""
        config = Config()

        assert config.n == 24
        assert config.steps is None
        assert config.total_steps == 72
        assert config.start_side == "left"
        assert config.initial_condition is None
        assert config.color_set == 1
        assert config.raster_dims == (69, 33)
        assert config.fit_method == "crop"

    def test_custom_values(self):
        """Config accepts custom values."""
        config = Config(n=7, steps=30, start_side="right", color_set=5)

        assert config.n == 7
        assert config.total_steps == 30
        assert config.start_side == "right"
        assert config.symbol_assignment == color_set(5)

    def test_invalid_n(self):
        """Config rejects n < 1."""
        with pytest.raises(ValueError, match="n must be"):
            Config(n=0)

    def test_invalid_steps(self):
        """Config rejects non-positive steps."""
        with pytest.raises(ValueError, match="steps"):
            Config(steps=0)

    def test_invalid_start_side(self):
        """Config rejects unknown start sides."""
        with pytest.raises(ValueError, match="start_side"):
            Config(start_side="middle")

    def test_invalid_color_set(self):
        """Config rejects colour sets outside 1..12."""
        with pytest.raises(ValueError, match="color_set"):
            Config(color_set=13)
        with pytest.raises(ValueError, match="color_set"):
            Config(color_set=0)

    def test_invalid_raster_dims(self):
        """Config rejects empty rasters."""
        with pytest.raises(ValueError, match="raster_dims"):
            Config(raster_dims=(0, 33))

    def test_invalid_fit_method(self):
        """Config rejects unknown fit methods."""
        with pytest.raises(ValueError, match="fit_method"):
            Config(fit_method="stretch")

    def test_invalid_initial_condition_name(self):
        """Config rejects unknown role names in the initial condition."""
        with pytest.raises(ValueError, match="unknown symbol"):
            Config(n=2, initial_condition=("Idle", "Captain"))

    def test_initial_symbols(self):
        """Initial condition names are parsed into symbols."""
        config = Config(n=3, initial_condition=["LeftFirstOfficer", "IDLE", "idle"])

        assert config.initial_condition == ("LeftFirstOfficer", "IDLE", "idle")
        assert config.initial_symbols == (
            Symbol.LEFT_FIRST_OFFICER,
            Symbol.IDLE,
            Symbol.IDLE,
        )

    def test_serialization_roundtrip(self):
        """Config serializes and deserializes correctly."""
        config = Config(n=9, steps=40, initial_condition=("Idle",) * 8 + ("RightFirstOfficer",))

        restored = Config.from_dict(config.to_dict())

        assert restored.n == config.n
        assert restored.steps == config.steps
        assert restored.initial_condition == config.initial_condition
        assert restored.raster_dims == config.raster_dims

    def test_from_dict_lists(self):
        """JSON-style lists are converted back to tuples."""
        restored = Config.from_dict({"n": 2, "raster_dims": [20, 10], "initial_condition": ["Idle", "Idle"]})

        assert restored.raster_dims == (20, 10)
        assert restored.initial_condition == ("Idle", "Idle")

    def test_from_args(self):
        """Config picks known, non-None fields from an argparse namespace."""
        args = argparse.Namespace(n=11, steps=None, color_set=2, sweep=None, plot=True)
        config = Config.from_args(args)

        assert config.n == 11
        assert config.steps is None
        assert config.color_set == 2
