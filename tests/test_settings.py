"""Tests for settings and the category set."""

import pytest
from pydantic import ValidationError

from injury_wheel.settings import DEFAULT_SEGMENTS, AISettings, Settings, WheelSettings
from injury_wheel.wheel.segments import DEFAULT_CATEGORIES, CategorySet


class TestWheelSettings:
    def test_defaults(self):
        settings = WheelSettings()
        assert settings.segments == DEFAULT_SEGMENTS
        assert settings.spin_duration_ms == 3000
        assert (settings.min_extra_turns, settings.max_extra_turns) == (5, 9)

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("INJURY_WHEEL_SPIN_DURATION_MS", "1500")
        monkeypatch.setenv("INJURY_WHEEL_SEGMENTS", '["Day-to-Day", "Indefinite"]')
        settings = WheelSettings()
        assert settings.spin_duration_ms == 1500
        assert settings.segments == ["Day-to-Day", "Indefinite"]

    def test_rejects_inverted_turns(self):
        with pytest.raises(ValidationError):
            WheelSettings(min_extra_turns=6, max_extra_turns=5)

    @pytest.mark.parametrize("segments", [[], ["ok", "  "]])
    def test_rejects_bad_segments(self, segments):
        with pytest.raises(ValidationError):
            WheelSettings(segments=segments)

    def test_rejects_negative_duration(self):
        with pytest.raises(ValidationError):
            WheelSettings(spin_duration_ms=-1)


class TestAISettings:
    def test_api_key_from_env(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "from-env")
        assert AISettings().gemini_api_key == "from-env"

    def test_api_key_alias(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.setenv("API_KEY", "legacy")
        assert AISettings().gemini_api_key == "legacy"

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.delenv("API_KEY", raising=False)
        settings = AISettings()
        assert settings.gemini_api_key == ""
        assert settings.gemini_model == "gemini-2.5-flash"
        assert settings.log_dir is None


class TestSettings:
    def test_nested(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("INJURY_WHEEL_AUTO_SPINS", "2")
        monkeypatch.setenv("GEMINI_API_KEY", "k")
        settings = Settings()
        assert settings.auto_spins == 2
        assert settings.ai_enabled
        assert settings.wheel.spin_duration_ms == 3000

    def test_dotenv_file(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        for name in ("INJURY_WHEEL_DEBUG", "GEMINI_API_KEY", "API_KEY", "INJURY_WHEEL_SPIN_DURATION_MS"):
            monkeypatch.delenv(name, raising=False)
        (tmp_path / ".env").write_text(
            "INJURY_WHEEL_DEBUG=true\n"
            "GEMINI_API_KEY=from-dotenv\n"
            "INJURY_WHEEL_SPIN_DURATION_MS=1200\n",
            encoding="utf-8",
        )

        settings = Settings()

        assert settings.debug is True
        assert settings.ai.gemini_api_key == "from-dotenv"
        assert settings.ai_enabled
        assert settings.wheel.spin_duration_ms == 1200


class TestCategorySet:
    def test_default_set(self):
        assert len(DEFAULT_CATEGORIES) == 8
        assert DEFAULT_CATEGORIES[0] == "Day-to-Day"
        assert DEFAULT_CATEGORIES.segment_angle == 45.0

    def test_bounds_and_center(self):
        assert DEFAULT_CATEGORIES.bounds(0) == (0.0, 45.0)
        assert DEFAULT_CATEGORIES.bounds(7) == (315.0, 360.0)
        assert DEFAULT_CATEGORIES.center(1) == 67.5
        with pytest.raises(IndexError):
            DEFAULT_CATEGORIES.bounds(8)

    def test_is_immutable(self):
        categories = CategorySet.from_labels(["A", "B"])
        with pytest.raises(AttributeError):
            categories.labels = ("C",)
        assert list(categories) == ["A", "B"]

    def test_direct_construction_copies_labels(self):
        labels = ["A", "B"]
        categories = CategorySet(labels)
        labels.append("C")
        assert categories.labels == ("A", "B")
        assert len(categories) == 2

    @pytest.mark.parametrize("labels", [[], ["A", ""], ["A", None]])
    def test_rejects_invalid_labels(self, labels):
        with pytest.raises(ValueError):
            CategorySet.from_labels(labels)
