"""Tests for the background fit settings."""

import pytest

from background_fit.fitting import FitParameters, LeastSquaresMethod
from background_fit.settings import BackgroundFitSettings, get_settings


@pytest.fixture
def settings() -> BackgroundFitSettings:
    """Provide a settings instance with default values."""
    return BackgroundFitSettings()


class TestBackgroundFitSettings:
    """Tests for BackgroundFitSettings class."""

    def test_default_values(self, settings: BackgroundFitSettings) -> None:
        """Test that default settings are set correctly."""
        assert not settings.model_fields_set
        assert settings.max_order == 2  # noqa
        assert settings.sampling_step == 1
        assert settings.method is LeastSquaresMethod.QR

    @pytest.mark.parametrize(
        ("env_var", "env_value", "field_name", "expected_value"),
        [
            pytest.param("BACKGROUND_FIT_MAX_ORDER", "4", "max_order", 4, id="max_order"),
            pytest.param("BACKGROUND_FIT_SAMPLING_STEP", "3", "sampling_step", 3, id="sampling_step"),
            pytest.param("BACKGROUND_FIT_METHOD", "svd", "method", LeastSquaresMethod.SVD, id="method"),
            pytest.param("background_fit_max_order", "0", "max_order", 0, id="lowercase_name"),
        ],
    )
    def test_settings_from_env(
        self,
        monkeypatch: pytest.MonkeyPatch,
        env_var: str,
        env_value: str,
        field_name: str,
        expected_value: int | LeastSquaresMethod,
    ) -> None:
        """Test that settings can be configured via environment variables."""
        # Arrange
        monkeypatch.setenv(env_var, env_value)

        # Act
        settings = BackgroundFitSettings()

        # Assert
        assert field_name in settings.model_fields_set
        assert getattr(settings, field_name) == expected_value

    @pytest.mark.parametrize(
        ("env_var", "value", "expected_match"),
        [
            pytest.param("BACKGROUND_FIT_MAX_ORDER", "-1", "greater than or equal to 0", id="max_order_negative"),
            pytest.param("BACKGROUND_FIT_SAMPLING_STEP", "0", "greater than or equal to 1", id="sampling_step_zero"),
            pytest.param("BACKGROUND_FIT_SAMPLING_STEP", "two", "valid integer", id="sampling_step_text"),
            pytest.param("BACKGROUND_FIT_METHOD", "cholesky", "qr", id="unknown_method"),
        ],
    )
    def test_validation_rejects_invalid_values(
        self, monkeypatch: pytest.MonkeyPatch, env_var: str, value: str, expected_match: str
    ) -> None:
        """Test that settings validation rejects invalid values."""
        # Arrange
        monkeypatch.setenv(env_var, value)

        # Act & Assert
        with pytest.raises(ValueError, match=expected_match):
            BackgroundFitSettings()

    def test_settings_are_frozen(self, settings: BackgroundFitSettings) -> None:
        """Test that settings are immutable after creation."""
        with pytest.raises(ValueError, match="frozen"):
            settings.max_order = 3  # type: ignore

    def test_unknown_variables_are_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that unknown prefixed variables do not break the settings."""
        # Arrange
        monkeypatch.setenv("BACKGROUND_FIT_UNKNOWN_FIELD", "value")

        # Act
        settings = BackgroundFitSettings()

        # Assert
        assert not hasattr(settings, "unknown_field")

    def test_fit_parameters_follow_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that the settings convert to fit parameters."""
        # Arrange
        monkeypatch.setenv("BACKGROUND_FIT_MAX_ORDER", "3")
        monkeypatch.setenv("BACKGROUND_FIT_METHOD", "svd")

        # Act
        parameters = BackgroundFitSettings().fit_parameters

        # Assert
        assert parameters == FitParameters(max_order=3, sampling_step=1, method=LeastSquaresMethod.SVD)

    def test_log_config_logs_configuration(
        self, settings: BackgroundFitSettings, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that log_config logs all configuration values."""
        # Act
        settings.log_config()

        # Assert
        assert "Background fit configuration: max order 2, sampling step 1, solver qr" in caplog.text


class TestGetSettings:
    """Tests for get_settings cached function."""

    def test_get_settings_returns_settings_instance(self) -> None:
        """Test that get_settings returns a BackgroundFitSettings instance."""
        assert isinstance(get_settings(), BackgroundFitSettings)

    def test_get_settings_cache_persists_across_calls(self) -> None:
        """Test that multiple calls to get_settings return the same cached instance."""
        # Act
        instance_ids = {id(get_settings()) for _ in range(5)}

        # Assert
        assert len(instance_ids) == 1

    def test_environment_is_read_once(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that environment changes only apply after clearing the cache."""
        # Arrange
        first = get_settings()
        monkeypatch.setenv("BACKGROUND_FIT_MAX_ORDER", "5")

        # Act & Assert
        assert get_settings().max_order == first.max_order == 2  # noqa
        get_settings.cache_clear()
        assert get_settings().max_order == 5  # noqa
