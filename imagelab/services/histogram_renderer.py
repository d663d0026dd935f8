"""Построение картинки гистограмм R/G/B (256x256) средствами Pillow."""
from __future__ import annotations

from typing import Sequence

import numpy as np
from PIL import Image as PILImage, ImageDraw

from imagelab.config import HistogramConfig
from imagelab.models.image import Image
from imagelab.services.image_service import image_from_pil


def normalize_histograms(histograms: Sequence[np.ndarray]) -> np.ndarray:
    """Приводит частоты к 0..255 относительно общего максимума трёх каналов."""
    counts = np.asarray(histograms, dtype=np.int64)
    max_count = int(counts.max()) if counts.size else 0
    if max_count == 0:
        return np.zeros_like(counts)
    return counts * 255 // max_count


def render_histogram(histograms: Sequence[np.ndarray]) -> Image:
    """
    Белый холст с сеткой и линейными графиками каналов.
    Точка i рисуется на высоте `SIZE - value`.
    """
    size = HistogramConfig.SIZE
    canvas = PILImage.new("RGB", (size, size), color=HistogramConfig.BACKGROUND)
    draw = ImageDraw.Draw(canvas)

    step = HistogramConfig.GRID_STEP
    for i in range(step, size, step):
        draw.line([(i, 0), (i, size)], fill=HistogramConfig.GRID_COLOR)
        draw.line([(0, i), (size, i)], fill=HistogramConfig.GRID_COLOR)

    for values, color in zip(normalize_histograms(histograms), HistogramConfig.CHANNEL_COLORS):
        points = [(i, size - int(v)) for i, v in enumerate(values)]
        draw.line(points, fill=color)
    return image_from_pil(canvas)
