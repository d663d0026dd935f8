"""Точка входа в приложение."""
from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from imagelab.controllers.app_controller import AppController


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="imagelab", description="Обработка изображений текстовыми командами.")
    parser.add_argument("--file", metavar="SCRIPT", help="выполнить команды из файла-скрипта")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Запускает скрипт (`--file`) или интерактивный режим до команды `exit`."""
    args = build_parser().parse_args(argv)
    controller = AppController(
        on_message=print,
        on_error=lambda message: print(message, file=sys.stderr),
    )
    if args.file:
        try:
            failures = controller.run_script(args.file)
        except FileNotFoundError as exc:
            print(exc, file=sys.stderr)
            return 2
        return 1 if failures else 0

    print(f"Команды: {', '.join(controller.commands())}. Для выхода введите exit.")
    controller.run_interactive(sys.stdin)
    return 0


if __name__ == "__main__":
    sys.exit(main())
