"""Точка входа в графическое приложение."""
import logging
import sys

from iconsmith.app import IconsmithApp
from iconsmith.config import load_config
from iconsmith.errors import ConfigError


def main() -> None:
    """Создаёт и запускает главное окно приложения.

    Необязательный первый аргумент: JSON-файл конфигурации.
    """
    logging.basicConfig(format="%(asctime)s %(levelname)s %(message)s", level=logging.INFO)
    try:
        config = load_config(sys.argv[1] if len(sys.argv) > 1 else None)
    except ConfigError as exc:
        logging.getLogger("iconsmith").error("%s", exc)
        sys.exit(1)
    app = IconsmithApp(config)
    app.mainloop()


if __name__ == "__main__":
    main()
