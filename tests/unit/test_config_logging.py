"""
Configuration and Logging Tests
"""

import logging
from pathlib import Path

import numpy as np
import pytest

from src.config import Config, config
from src.uncertain import primitives
from src.utils.logging_setup import setup_logging


class TestConfig:

    def test_defaults(self):
        fresh = Config.from_env()
        assert fresh.sampling.sample_count >= 1
        assert 0.0 < fresh.sampling.confidence < 1.0
        assert 0.0 < fresh.sampling.alpha < 1.0
        assert 0.0 < fresh.sampling.beta < 1.0
        assert fresh.billing.price_per_kwh > 0

    def test_shared_generator_seeded_from_config(self, monkeypatch):
        monkeypatch.setattr(primitives, "_shared_rng", None)
        monkeypatch.setattr(config.sampling, "seed", 7)
        expected = np.random.default_rng(7).random()
        assert primitives.draw_unit(primitives.default_rng()) == expected

    def test_reseed_replaces_generator(self):
        first = primitives.reseed(11)
        assert primitives.default_rng() is first
        a = primitives.draw_unit(primitives.default_rng())
        primitives.reseed(11)
        assert primitives.draw_unit(primitives.default_rng()) == a


class TestLogging:

    @pytest.fixture(autouse=True)
    def restore_root_level(self):
        root = logging.getLogger()
        level = root.level
        yield
        root.setLevel(level)

    def test_string_level(self):
        setup_logging("DEBUG")
        assert logging.getLogger().level == logging.DEBUG
        setup_logging("warning")
        assert logging.getLogger().level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self):
        setup_logging("NOT_A_LEVEL")
        assert logging.getLogger().level == logging.INFO

    def test_repeat_calls_do_not_add_handlers(self):
        setup_logging(logging.INFO)
        count = len(logging.getLogger().handlers)
        setup_logging(logging.INFO)
        assert len(logging.getLogger().handlers) == count


class TestPackaging:

    def test_project_metadata_has_no_readme_document(self):
        pyproject = Path(__file__).resolve().parents[2] / "pyproject.toml"
        lines = pyproject.read_text().splitlines()
        assert not any(line.startswith("readme") for line in lines)
