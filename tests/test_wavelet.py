"""Tests for the Haar wavelet codec: transforms, thresholding and the compression pipeline."""

import numpy as np
import pytest

from imagelab.services import wavelet


def test_next_power_of_two():
    assert [wavelet.next_power_of_two(n) for n in (1, 2, 3, 5, 8, 9)] == [1, 2, 4, 8, 8, 16]


def test_pad_makes_zero_filled_square():
    padded = wavelet.pad(np.ones((3, 5)))
    assert padded.shape == (8, 8)
    assert padded[:3, :5].sum() == 15
    assert padded.sum() == 15


def test_round2_rounds_half_up():
    values = np.array([1.006, -0.7071, 2.12132, -2.001])
    np.testing.assert_allclose(wavelet.round2(values), [1.01, -0.71, 2.12, -2.0], atol=1e-9)


def test_forward_2x2():
    result = wavelet.forward(np.array([[1.0, 2.0], [3.0, 4.0]]))
    np.testing.assert_allclose(result, [[5.0, -1.0], [-2.0, 0.0]], atol=1e-3)


def test_inverse_2x2():
    result = wavelet.inverse(np.array([[5.0, -1.0], [-2.0, 0.0]]), 2, 2)
    np.testing.assert_allclose(result, [[1.0, 2.0], [3.0, 4.0]], atol=1e-3)


def test_forward_pads_non_square_input():
    result = wavelet.forward(np.array([[1.0, 2.0, 3.0, 4.0], [5.0, 6.0, 7.0, 8.0]]))
    expected = [
        [7.0, 11.0, -0.71, -0.71],
        [0.0, 0.0, -0.71, -0.71],
        [-5.66, 0.0, 0.0, 0.0],
        [0.0, 0.0, 0.0, 0.0],
    ]
    np.testing.assert_allclose(result, expected, atol=1e-3)


def test_inverse_crops_to_original_shape():
    transformed = np.array(
        [
            [7.0, 11.0, -0.71, -0.71],
            [0.0, 0.0, -0.71, -0.71],
            [-5.66, 0.0, 0.0, 0.0],
            [0.0, 0.0, 0.0, 0.0],
        ]
    )
    result = wavelet.inverse(transformed, 2, 4)
    np.testing.assert_allclose(result, [[1.0, 2.0, 3.0, 4.0], [5.0, 6.0, 7.0, 8.0]], atol=1e-3)


def test_forward_does_not_modify_input():
    matrix = np.array([[1.0, 2.0], [3.0, 4.0]])
    wavelet.forward(matrix)
    np.testing.assert_array_equal(matrix, [[1.0, 2.0], [3.0, 4.0]])


def test_round_trip_within_rounding_tolerance():
    matrix = (np.arange(16, dtype=np.float64).reshape(4, 4) * 37) % 256
    restored = wavelet.inverse(wavelet.forward(matrix), 4, 4)
    np.testing.assert_allclose(restored, matrix, atol=0.25)


@pytest.fixture
def channels():
    return [
        np.array([[1.0, -2.0], [3.0, -4.0]]),
        np.array([[-1.0, 2.0], [-3.0, 4.0]]),
        np.array([[0.5, -0.5], [1.5, -1.5]]),
    ]


@pytest.mark.parametrize("percentage, expected", [(0, 0.5), (50, 2.0), (80, 3.0), (99.9, 4.0)])
def test_threshold_uses_distinct_absolute_values(channels, percentage, expected):
    assert wavelet.threshold(channels, percentage) == pytest.approx(expected)


def test_threshold_full_compression_sentinel(channels):
    assert wavelet.threshold(channels, 100) == wavelet.MAX_THRESHOLD


def test_truncate_zeroes_strictly_smaller_values():
    truncated = wavelet.truncate(np.array([[1.0, -2.0], [3.0, -4.0]]), 2.0)
    np.testing.assert_array_equal(truncated, [[0.0, -2.0], [3.0, -4.0]])


def test_compress_channels_full_compression_is_black():
    data = np.full((3, 5, 3), 200, dtype=np.uint8)
    result = wavelet.compress_channels(data, 100.0)
    assert result.shape == (3, 5, 3)
    assert result.dtype == np.uint8
    assert not result.any()


def test_compress_channels_zero_percentage_keeps_flat_channels():
    data = np.zeros((2, 2, 3), dtype=np.uint8)
    data[:, :, 0] = [[10, 12], [14, 16]]
    data[:, :, 2] = 100
    result = wavelet.compress_channels(data, 0.0)
    np.testing.assert_array_equal(result[:, :, 1], 0)
    np.testing.assert_array_equal(result[:, :, 2], 100)
