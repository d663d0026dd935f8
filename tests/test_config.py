"""Tests for runtime settings and the package logger."""

import logging

import pytest

from imagelab.config import HistogramConfig, KernelConfig, Settings
from imagelab.utils.logging import get_logger


def test_settings_default_level(monkeypatch):
    monkeypatch.delenv("IMAGELAB_LOG_LEVEL", raising=False)
    assert Settings.from_env().log_level == logging.INFO


def test_settings_reads_environment(monkeypatch):
    monkeypatch.setenv("IMAGELAB_LOG_LEVEL", " debug ")
    assert Settings.from_env().log_level == logging.DEBUG


def test_settings_rejects_unknown_level(monkeypatch):
    monkeypatch.setenv("IMAGELAB_LOG_LEVEL", "LOUD")
    with pytest.raises(ValueError):
        Settings.from_env()


def test_kernels_are_odd_squares():
    for kernel in (KernelConfig.BLUR, KernelConfig.SHARPEN):
        assert len(kernel) % 2 == 1
        assert all(len(row) == len(kernel) for row in kernel)
    assert sum(map(sum, KernelConfig.BLUR)) == pytest.approx(1.0)


def test_histogram_grid_fits_canvas():
    assert HistogramConfig.SIZE % HistogramConfig.GRID_STEP == 0


def test_logger_is_shared_and_configured_once():
    first = get_logger()
    second = get_logger()
    assert first is second
    assert first.name == "imagelab"
    assert len(first.handlers) == 1
