"""Математика тоновых кривых: поиск пиков гистограммы и коэффициенты квадратичной кривой уровней."""
from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from imagelab.config import ToneConfig


def find_meaningful_peak(histogram: Sequence[int]) -> int:
    """Индекс самого частого значения в [PEAK_LOW, PEAK_HIGH).

    Края отброшены, чтобы клиппированные 0/255 не забивали пик. При равенстве берётся
    меньший индекс; если диапазон пуст, возвращается 0.
    """
    window = np.asarray(histogram)[ToneConfig.PEAK_LOW:ToneConfig.PEAK_HIGH]
    if window.size == 0 or window.max() <= 0:
        return 0
    return ToneConfig.PEAK_LOW + int(np.argmax(window))


def average_peak(peaks: Sequence[int]) -> int:
    return sum(peaks) // len(peaks)


def validate_levels(black: int, mid: int, white: int) -> None:
    """Проверяет контрольные точки уровней.

    Raises:
        ValueError: если точки вне [0, 255], не упорядочены (b <= m <= w)
            или совпадают (кривая через них не определена).
    """
    if not all(0 <= v <= 255 for v in (black, mid, white)):
        raise ValueError("Значения уровней должны быть в диапазоне 0..255")
    if not (black <= mid <= white):
        raise ValueError("Значения уровней должны возрастать: b <= m <= w")
    if black == mid or mid == white:
        raise ValueError("Контрольные точки уровней должны быть различны")


def level_coefficients(black: int, mid: int, white: int) -> Tuple[float, float, float]:
    """Коэффициенты (a, c, d) кривой y = a*x^2 + c*x + d через (b, 0), (m, 128), (w, 255).

    Знаменатель равен (m - w)(b - m)(b - w) и обращается в ноль при совпадении любых двух точек.
    """
    validate_levels(black, mid, white)
    _y_black, y_mid, y_white = ToneConfig.LEVEL_TARGETS
    b, m, w = black, mid, white
    denominator = b * b * (m - w) - b * (m * m - w * w) + w * m * m - m * w * w
    a_num = -b * (y_mid - y_white) + y_mid * w - y_white * m
    c_num = b * b * (y_mid - y_white) + y_white * m * m - y_mid * w * w
    d_num = b * b * (y_white * m - y_mid * w) - b * (y_white * m * m - y_mid * w * w)
    return a_num / denominator, c_num / denominator, d_num / denominator
