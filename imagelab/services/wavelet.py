"""Вейвлет Хаара: прямое/обратное 2D-преобразование и пороговое сжатие коэффициентов.

Принципы:
- Чистые функции: каждая операция принимает матрицу и возвращает новую, без общего состояния.
- Квантование: каждое усреднение/разность округляется до 2 знаков (с потерями).
"""
from __future__ import annotations

import sys
from typing import List, Sequence

import numpy as np

from imagelab.utils.logging import get_logger

_SQRT_TWO = np.sqrt(2.0)
# «Бесконечный» порог: при 100% обнуляются все коэффициенты
MAX_THRESHOLD = sys.float_info.max

logger = get_logger()


def round2(values: np.ndarray) -> np.ndarray:
    """Округление до 2 знаков после запятой, половина вверх."""
    return np.floor(values * 100.0 + 0.5) / 100.0


def next_power_of_two(number: int) -> int:
    power = 1
    while power < number:
        power <<= 1
    return power


def pad(matrix: np.ndarray) -> np.ndarray:
    """Дополняет матрицу нулями до квадрата со стороной 2^k >= max(rows, cols)."""
    rows, cols = matrix.shape
    side = next_power_of_two(max(rows, cols))
    padded = np.zeros((side, side), dtype=np.float64)
    padded[:rows, :cols] = matrix
    return padded


def unpad(matrix: np.ndarray, rows: int, cols: int) -> np.ndarray:
    return matrix[:rows, :cols].copy()


# ---------- 1D-шаги (по строкам матрицы) ----------
def _avg_and_diff(block: np.ndarray) -> np.ndarray:
    """Один шаг разложения по последней оси: [средние | разности].

    Пары (0,1), (2,3), ...; у непарного последнего элемента партнёр равен 0.
    """
    if block.shape[-1] % 2:
        block = np.concatenate([block, np.zeros(block.shape[:-1] + (1,))], axis=-1)
    first = block[..., 0::2]
    second = block[..., 1::2]
    average = round2((first + second) / _SQRT_TWO)
    difference = round2((first - second) / _SQRT_TWO)
    return np.concatenate([average, difference], axis=-1)


def _inv_avg_and_diff(block: np.ndarray) -> np.ndarray:
    """Обратный шаг: первая половина и вторая половина снова сплетаются в пары."""
    half = block.shape[-1] // 2
    first = block[..., :half]
    second = block[..., half:2 * half]
    restored = np.empty(block.shape[:-1] + (2 * half,), dtype=np.float64)
    restored[..., 0::2] = round2((first + second) / _SQRT_TWO)
    restored[..., 1::2] = round2((first - second) / _SQRT_TWO)
    return restored


def _transform_rows(block: np.ndarray) -> np.ndarray:
    """Полное 1D-разложение каждой строки: шаги размера n, n/2, ..., 2."""
    result = block.copy()
    m = result.shape[1]
    while m > 1:
        result[:, :m] = _avg_and_diff(result[:, :m])[:, :m]
        m //= 2
    return result


def _invert_rows(block: np.ndarray) -> np.ndarray:
    """Полное 1D-восстановление каждой строки: шаги размера 2, 4, ..., n."""
    result = block.copy()
    length = result.shape[1]
    m = 2
    while m <= length:
        result[:, :m] = _inv_avg_and_diff(result[:, :m])
        m *= 2
    return result


# ---------- 2D ----------
def forward(matrix: np.ndarray) -> np.ndarray:
    """Прямое 2D-преобразование Хаара.

    Матрица дополняется до квадрата 2^k. На каждом уровне n строки, затем столбцы
    левого верхнего блока n x n полностью раскладываются, после чего n делится пополам.

    Args:
        matrix: Двумерный массив значений одного канала.

    Returns:
        Квадратная матрица коэффициентов (грубое приближение в левом верхнем углу).
    """
    coefficients = pad(np.asarray(matrix, dtype=np.float64))
    n = coefficients.shape[0]
    while n > 1:
        coefficients[:n, :n] = _transform_rows(coefficients[:n, :n])
        coefficients[:n, :n] = _transform_rows(coefficients[:n, :n].T).T
        n //= 2
    return coefficients


def inverse(coefficients: np.ndarray, rows: int, cols: int) -> np.ndarray:
    """Обратное 2D-преобразование с обрезкой до исходного размера rows x cols.

    Зеркально `forward`: блок c = 2, 4, ..., N; сначала столбцы, затем строки.
    """
    restored = np.array(coefficients, dtype=np.float64)
    size = restored.shape[0]
    c = 2
    while c <= size:
        restored[:c, :c] = _invert_rows(restored[:c, :c].T).T
        restored[:c, :c] = _invert_rows(restored[:c, :c])
        c *= 2
    return unpad(restored, rows, cols)


def threshold(channels: Sequence[np.ndarray], percentage: float) -> float:
    """Общий порог для всех каналов по доле `percentage` различных |коэффициентов|.

    Индекс берётся среди *различных* абсолютных значений (повторы схлопываются),
    а не среди всех коэффициентов.
    """
    if percentage == 100.0:
        return MAX_THRESHOLD
    distinct = np.unique(np.abs(np.concatenate([np.ravel(c) for c in channels])))
    index = int(distinct.size * (percentage / 100.0))
    index = min(index, distinct.size - 1)
    return float(distinct[index])


def truncate(coefficients: np.ndarray, limit: float) -> np.ndarray:
    """Обнуляет коэффициенты с |значением| строго меньше порога."""
    return np.where(np.abs(coefficients) < limit, 0.0, coefficients)


def compress_channels(channels: np.ndarray, percentage: float) -> np.ndarray:
    """Сжатие изображения (H, W, 3) через вейвлет Хаара с общим порогом.

    Каналы раскладываются в транспонированном виде (x по первой оси): округление на
    каждом шаге делает порядок строк/столбцов значимым для результата.

    Returns:
        Массив uint8 той же формы.
    """
    height, width, depth = channels.shape
    transformed: List[np.ndarray] = [
        forward(channels[:, :, i].astype(np.float64).T) for i in range(depth)
    ]
    limit = threshold(transformed, percentage)
    logger.debug("Порог сжатия %.2f%%: %s", percentage, limit)

    restored = np.empty((height, width, depth), dtype=np.float64)
    for i, coefficients in enumerate(transformed):
        restored[:, :, i] = inverse(truncate(coefficients, limit), width, height).T
    return np.floor(np.clip(restored, 0, 255) + 0.5).astype(np.uint8)

