"""Контроллер приложения: разбор текстовых команд и оркестрация сервисов.

SOLID:
- SRP: класс связывает текстовые команды с сервисами (без логики обработки изображений).
- DIP: зависит от сервисов как от ролей; конкретные реализации подставляются через поля.
Clean Code:
- Обработчики компактны; вычисления вынесены в `ProcessService` и `Image`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Set

from imagelab.models.image import Channel
from imagelab.models.image_model import ImageData
from imagelab.services.image_service import ImageService
from imagelab.services.process_service import ProcessService
from imagelab.utils.logging import get_logger

logger = get_logger()

EXIT_COMMAND = "exit"
# фильтры, принимающие необязательный хвост `split <p>`
_SPLIT_FILTERS = (
    "value-component",
    "luma-component",
    "intensity-component",
    "sepia",
    "blur",
    "sharpen",
    "color-correct",
)
_COMPONENTS = {
    "red-component": Channel.RED,
    "green-component": Channel.GREEN,
    "blue-component": Channel.BLUE,
}

# обработчик может вернуть подробности для сообщения об успехе
Handler = Callable[[Sequence[str]], Optional[str]]


def parse_script(text: str) -> List[str]:
    """Строки скрипта без пустых и комментариев (`#`)."""
    commands = []
    for line in text.splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            commands.append(line)
    return commands


def _require(args: Sequence[str], count: int, usage: str, tail: bool = False) -> None:
    """Проверяет число аргументов; при `tail` хвост после `count` разбирает `_parse_split`."""
    if len(args) < count or (not tail and len(args) > count):
        raise ValueError(f"Неверное число аргументов. Использование: {usage}")


def _parse_split(args: Sequence[str], index: int, usage: str) -> Optional[float]:
    """Значение из хвоста `split <процент>` в позиции `index`, если хвост есть."""
    rest = args[index:]
    if not rest:
        return None
    if len(rest) != 2 or rest[0] != "split":
        raise ValueError(f"Лишние аргументы: {' '.join(rest)}. Использование: {usage}")
    return float(rest[1])


def _describe(data: ImageData) -> str:
    text = f"{data.path.name}, {data.width}x{data.height}, {data.format}"
    if data.size_bytes is not None:
        text += f", {data.size_bytes} байт"
    return text


@dataclass
class AppController:
    """Связывает текстовые команды с прикладной логикой.

    Ответственности:
    - Разбор строки команды и проверка количества аргументов.
    - Загрузка/сохранение через `ImageService`.
    - Обработка через `ProcessService`, который хранит изображения по именам.
    - Сообщения об успехе/ошибке через колбэки `on_message` / `on_error`.
    """
    process_service: ProcessService = field(default_factory=ProcessService)
    image_service: ImageService = field(default_factory=ImageService)
    on_message: Optional[Callable[[str], None]] = None
    on_error: Optional[Callable[[str], None]] = None

    _handlers: Dict[str, Handler] = field(init=False, repr=False)
    # пути скриптов, выполняемых сейчас; повторный вход запрещён
    _running: Set[Path] = field(init=False, repr=False, default_factory=set)

    def __post_init__(self) -> None:
        self._handlers = {
            "load": self._handle_load,
            "save": self._handle_save,
            "horizontal-flip": self._handle_horizontal_flip,
            "vertical-flip": self._handle_vertical_flip,
            "brighten": self._handle_brighten,
            "rgb-split": self._handle_rgb_split,
            "rgb-combine": self._handle_rgb_combine,
            "compress": self._handle_compress,
            "histogram": self._handle_histogram,
            "levels-adjust": self._handle_levels_adjust,
            "run": self._handle_run,
        }
        for name in _COMPONENTS:
            self._handlers[name] = self._make_component_handler(name)
        for name in _SPLIT_FILTERS:
            self._handlers[name] = self._make_filter_handler(name)

    # ---- Public API ----
    def commands(self) -> List[str]:
        return sorted(self._handlers)

    def execute(self, line: str) -> bool:
        """Выполняет одну команду; возвращает True при успехе.

        Ошибки команды (неверные аргументы, отсутствующее изображение, ошибки файлов)
        не прерывают работу: они журналируются и передаются в `on_error`.
        """
        parts = line.split()
        if not parts:
            return True
        name, args = parts[0], parts[1:]
        handler = self._handlers.get(name)
        if handler is None:
            self._report_error(f"Неизвестная команда: {name}")
            return False
        try:
            details = handler(args)
        except (ValueError, IndexError, LookupError, OSError) as exc:
            self._report_error(f"{name}: ошибка выполнения: {exc}")
            return False
        self._report(f"{name}: выполнено ({details})" if details else f"{name}: выполнено")
        return True

    def run_script(self, script_path: str | Path) -> int:
        """Выполняет все команды файла-скрипта; возвращает число неудачных команд.

        Raises:
            FileNotFoundError: если файла нет.
            ValueError: если скрипт уже выполняется (прямо или через цепочку `run`).
        """
        path = Path(script_path)
        if not path.is_file():
            raise FileNotFoundError(f"Файл скрипта не найден: {path}")
        key = path.resolve()
        if key in self._running:
            raise ValueError(f"Рекурсивный запуск скрипта: {path}")
        logger.info("Запуск скрипта %s", path)
        self._running.add(key)
        try:
            failures = 0
            for command in parse_script(path.read_text(encoding="utf-8")):
                if not self.execute(command):
                    failures += 1
        finally:
            self._running.discard(key)
        return failures

    def run_interactive(self, lines: Iterable[str]) -> None:
        """Выполняет команды из потока строк до команды `exit`."""
        for line in lines:
            line = line.strip()
            if line == EXIT_COMMAND:
                break
            if line and not line.startswith("#"):
                self.execute(line)

    # ---- Handlers ----
    def _handle_load(self, args: Sequence[str]) -> str:
        _require(args, 2, "load <путь> <имя>")
        data = self.image_service.load_image(args[0])
        self.process_service.add(args[1], data.image)
        return _describe(data)

    def _handle_save(self, args: Sequence[str]) -> None:
        _require(args, 2, "save <путь> <имя>")
        self.image_service.save_image(args[0], self.process_service.get(args[1]))

    def _make_component_handler(self, command: str) -> Handler:
        channel = _COMPONENTS[command]

        def handler(args: Sequence[str]) -> None:
            _require(args, 2, f"{command} <имя> <результат>")
            self.process_service.component(channel, args[0], args[1])

        return handler

    def _make_filter_handler(self, command: str) -> Handler:
        method = getattr(self.process_service, command.replace("-", "_"))
        usage = f"{command} <имя> <результат> [split <процент>]"

        def handler(args: Sequence[str]) -> None:
            _require(args, 2, usage, tail=True)
            method(args[0], args[1], _parse_split(args, 2, usage))

        return handler

    def _handle_horizontal_flip(self, args: Sequence[str]) -> None:
        _require(args, 2, "horizontal-flip <имя> <результат>")
        self.process_service.horizontal_flip(args[0], args[1])

    def _handle_vertical_flip(self, args: Sequence[str]) -> None:
        _require(args, 2, "vertical-flip <имя> <результат>")
        self.process_service.vertical_flip(args[0], args[1])

    def _handle_brighten(self, args: Sequence[str]) -> None:
        _require(args, 3, "brighten <шаг> <имя> <результат>")
        self.process_service.brighten(int(args[0]), args[1], args[2])

    def _handle_rgb_split(self, args: Sequence[str]) -> None:
        _require(args, 4, "rgb-split <имя> <красный> <зелёный> <синий>")
        self.process_service.rgb_split(args[0], args[1], args[2], args[3])

    def _handle_rgb_combine(self, args: Sequence[str]) -> None:
        _require(args, 4, "rgb-combine <результат> <красный> <зелёный> <синий>")
        self.process_service.rgb_combine(args[0], args[1], args[2], args[3])

    def _handle_compress(self, args: Sequence[str]) -> None:
        _require(args, 3, "compress <процент> <имя> <результат>")
        self.process_service.compress(float(args[0]), args[1], args[2])

    def _handle_histogram(self, args: Sequence[str]) -> None:
        _require(args, 2, "histogram <имя> <результат>")
        self.process_service.histogram_image(args[0], args[1])

    def _handle_levels_adjust(self, args: Sequence[str]) -> None:
        usage = "levels-adjust <b> <m> <w> <имя> <результат> [split <процент>]"
        _require(args, 5, usage, tail=True)
        black, mid, white = (int(v) for v in args[:3])
        self.process_service.adjust_levels(black, mid, white, args[3], args[4], _parse_split(args, 5, usage))

    def _handle_run(self, args: Sequence[str]) -> None:
        _require(args, 1, "run <файл-скрипта>")
        failures = self.run_script(args[0])
        if failures:
            raise ValueError(f"в скрипте {args[0]} неудачных команд: {failures}")

    # ---- Helpers ----
    def _report(self, message: str) -> None:
        logger.info(message)
        if self.on_message is not None:
            self.on_message(message)

    def _report_error(self, message: str) -> None:
        logger.error(message)
        if self.on_error is not None:
            self.on_error(message)
