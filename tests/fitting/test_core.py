from unittest.mock import patch

import numpy as np
import pytest
from pydantic import ValidationError

from background_fit import (
    BackgroundCorrection,
    DimensionMismatchError,
    UnderdeterminedSystemError,
    UnsupportedInputKindError,
    fit_background,
    process,
    remove_background,
)


@pytest.mark.integration
class TestProcessScenarios:
    def test_uniform_image_gives_uniform_background(self, ones_image, full_mask):
        background = process(ones_image, full_mask, max_order=0, sampling_step=1)
        assert background.shape == (10, 10)
        assert np.allclose(background, 1.0)

    def test_constant_background_is_extended_under_foreground(self, center_hole_mask):
        image = np.full((20, 20), 5.0)
        background = process(image, center_hole_mask, max_order=1, sampling_step=1)
        assert background.shape == (20, 20)
        assert np.allclose(background, 5.0)
        assert np.allclose(background[8:12, 8:12], 5.0)

    def test_foreground_objects_are_removed(self, foreground_image, quadratic_image):
        image, mask = foreground_image
        background = process(image, mask, max_order=2, sampling_step=2)
        assert np.allclose(background, quadratic_image)


class TestProcessValidation:
    @pytest.mark.parametrize(
        "image, mask, error",
        [
            pytest.param(
                np.ones((5, 5, 5)),
                np.ones((5, 5, 5), dtype=bool),
                DimensionMismatchError,
                id="3D image and mask",
            ),
            pytest.param(
                np.ones((5, 5)),
                np.ones((6, 5), dtype=bool),
                DimensionMismatchError,
                id="mismatching mask",
            ),
            pytest.param(
                np.ones((5, 5)),
                np.ones((5, 5)),
                UnsupportedInputKindError,
                id="float mask",
            ),
            pytest.param(
                np.array([["a"] * 5] * 5),
                np.ones((5, 5), dtype=bool),
                UnsupportedInputKindError,
                id="string image",
            ),
        ],
    )
    def test_invalid_inputs_fail_before_allocating_output(self, image, mask, error):
        with patch("background_fit.fitting.fitter.cast_to_dtype") as cast, patch(
            "background_fit.fitting.fitter.compute_monomial_tables"
        ) as tables:
            with pytest.raises(error):
                process(image, mask, max_order=1)
        cast.assert_not_called()
        tables.assert_not_called()

    def test_underdetermined_fit_reports_counts(self):
        mask = np.zeros((8, 8), dtype=bool)
        mask[2, 2] = mask[5, 5] = True
        with pytest.raises(UnderdeterminedSystemError, match="Only 2 background sample"):
            process(np.ones((8, 8)), mask, max_order=1)

    @pytest.mark.parametrize(
        "max_order, sampling_step",
        [(-1, 1), (2, 0), (2, -3)],
    )
    def test_invalid_parameters_are_rejected(self, ones_image, full_mask, max_order, sampling_step):
        with pytest.raises(ValueError):
            process(ones_image, full_mask, max_order=max_order, sampling_step=sampling_step)


class TestFitBackground:
    def test_defaults_come_from_settings(self, foreground_image, quadratic_image):
        image, mask = foreground_image
        background = fit_background(image, mask)
        assert np.allclose(background, quadratic_image)

    def test_settings_from_environment_are_used(
        self, monkeypatch: pytest.MonkeyPatch, foreground_image
    ):
        monkeypatch.setenv("BACKGROUND_FIT_MAX_ORDER", "0")
        image, mask = foreground_image
        background = fit_background(image, mask)
        assert np.allclose(background, image[mask].mean())

    def test_explicit_parameters_override_settings(
        self, monkeypatch: pytest.MonkeyPatch, foreground_image, quadratic_image
    ):
        monkeypatch.setenv("BACKGROUND_FIT_MAX_ORDER", "0")
        image, mask = foreground_image
        background = fit_background(image, mask, max_order=2, method="svd")
        assert np.allclose(background, quadratic_image)

    def test_foreground_mask_can_be_inverted(self, foreground_image, quadratic_image):
        image, mask = foreground_image
        background = fit_background(image, ~mask, max_order=2, invert_mask=True)
        assert np.allclose(background, quadratic_image)

    def test_invalid_method_is_rejected(self, ones_image, full_mask):
        with pytest.raises(ValidationError):
            fit_background(ones_image, full_mask, method="cholesky")


class TestRemoveBackground:
    def test_correction_contains_fit_details(self, foreground_image):
        image, mask = foreground_image
        result = remove_background(image, mask, max_order=2)
        assert isinstance(result, BackgroundCorrection)
        assert result.coefficients.shape == (6,)
        assert len(result.exponents) == 6
        assert result.n_samples == np.count_nonzero(mask)

    def test_corrected_image_keeps_only_the_foreground(self, foreground_image):
        image, mask = foreground_image
        result = remove_background(image, mask, max_order=2)
        assert np.allclose(result.corrected[mask], 0.0, atol=1e-8)
        assert np.allclose(result.corrected[~mask], 500.0)
        assert np.allclose(result.corrected + result.background, image)
        assert np.isclose(result.residual_rms, 0.0, atol=1e-8)

    def test_residual_rms_measures_background_noise(self, rng):
        image = 50.0 + rng.normal(0.0, 2.0, size=(64, 64))
        mask = np.ones(image.shape, dtype=bool)
        result = remove_background(image, mask, max_order=0)
        assert np.isclose(result.residual_rms, np.std(image))

    def test_integer_images_are_corrected_as_floats(self):
        image = np.full((6, 6), 7, dtype=np.int16)
        result = remove_background(image, np.ones((6, 6), dtype=bool), max_order=0)
        assert result.corrected.dtype == np.float64
        assert np.allclose(result.corrected, 0.0)
