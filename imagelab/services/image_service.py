"""Загрузка и сохранение изображений на диске.

Принципы:
- SRP: класс отвечает только за файловый ввод-вывод и извлечение свойств.
- OCP: чтение любых форматов через Pillow; запись PPM в текстовом виде P3, остальное через Pillow.
- LSP/ISP: возвращает `ImageData` с предсказуемыми полями; интерфейс узкий и конкретный.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image as PILImage, UnidentifiedImageError

from imagelab.models.image import Image
from imagelab.models.image_model import ImageData
from imagelab.utils.logging import get_logger

logger = get_logger()

PPM_SUFFIX = ".ppm"
PILLOW_SUFFIXES = (".png", ".jpg", ".jpeg", ".bmp")


def image_from_pil(pil_image: PILImage.Image) -> Image:
    """Преобразует `PIL.Image.Image` любого режима в RGB `Image`."""
    return Image.from_array(np.asarray(pil_image.convert("RGB"), dtype=np.uint8))


def image_to_pil(image: Image) -> PILImage.Image:
    return PILImage.fromarray(image.to_array())


def _format_ppm(image: Image) -> str:
    data = image.to_array()
    out = ["P3", f"{image.width} {image.height}", "255"]
    for row in data:
        out.append(" ".join(f"{r} {g} {b}" for r, g, b in row))
    return "\n".join(out) + "\n"


class ImageService:
    def load_image(self, file_path: str | Path) -> ImageData:
        """Загружает изображение с диска и возвращает его вместе с метаданными.

        Args:
            file_path: Путь до файла изображения (.ppm, .png, .jpg, .jpeg, .bmp).

        Returns:
            `ImageData` c `Image` в RGB, размерами, форматом и размером файла.

        Raises:
            FileNotFoundError: если путь не существует или не указывает на файл.
            ValueError: если файл не распознан как изображение.
        """
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(f"Файл не найден: {path}")

        try:
            with PILImage.open(path) as pil_image:
                fmt = pil_image.format or path.suffix.lstrip(".").upper()
                image = image_from_pil(pil_image)
        except (UnidentifiedImageError, OSError, ValueError) as exc:
            # OSError/ValueError: Pillow не смог декодировать данные (усечённый файл, битый заголовок)
            raise ValueError(f"Файл не является изображением: {path}") from exc

        try:
            size_bytes: Optional[int] = path.stat().st_size
        except OSError:
            size_bytes = None

        logger.info("Загружено %s (%dx%d, %s)", path, image.width, image.height, fmt)
        return ImageData(
            path=path,
            image=image,
            width=image.width,
            height=image.height,
            format=fmt,
            size_bytes=size_bytes,
        )

    def save_image(self, file_path: str | Path, image: Image) -> Path:
        """Сохраняет изображение; формат определяется расширением.

        Raises:
            ValueError: если расширение не поддерживается.
            OSError: при ошибке записи.
        """
        path = Path(file_path)
        suffix = path.suffix.lower()
        if suffix == PPM_SUFFIX:
            path.write_text(_format_ppm(image), encoding="ascii")
        elif suffix in PILLOW_SUFFIXES:
            image_to_pil(image).save(path)
        else:
            raise ValueError(f"Неподдерживаемый формат файла: {path.suffix or path.name}")
        logger.info("Сохранено %s (%dx%d)", path, image.width, image.height)
        return path
