"""
Пакет barcode_raster
====================

Растеризация символов штрихкодов (сеток модулей) в изображения PNG/BMP/GIF/JPEG.

Этот пакет предоставляет:
    - Точную раскладку модулей в прямоугольники пикселей (поле тишины, масштаб)
    - Одномерные (штриховые) и двумерные (матричные) формы символов
    - Подпись цифр EAN-8/EAN-13 в вырезанных под штрихами «колодцах»
    - Источники сеток модулей на основе reportlab и qrcode
    - Кодирование в PNG, BMP, GIF и JPEG через Pillow

Пример базового использования:
    >>> from barcode_raster import ImageRenderer, RenderConfig, encode_symbol
    >>>
    >>> symbol = encode_symbol("ean13", "590123412345")
    >>> renderer = ImageRenderer(RenderConfig(pixel_size=4, include_ean_text=True))
    >>> with open("ean13.png", "wb") as f:
    ...     report = renderer.render(symbol, f)
    >>> report.width, report.height
    (460, 240)

Управление конфигурацией:
    >>> import os
    >>> os.environ['BARCODE_RASTER_LOG_LEVEL'] = 'DEBUG'
    >>>
    >>> from barcode_raster import load_config, get_logger
    >>>
    >>> config = load_config()
    >>> print(f"Формат по умолчанию: {config['image_format']}")

Версия: 0.1.0
Лицензия: MIT
Python: 3.9+
"""

import json
import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

# =============================================================================
# МЕТАДАННЫЕ ВЕРСИИ
# =============================================================================

__version__ = "0.1.0"
__author__ = "barcode_raster Development Team"
__description__ = "Barcode module-grid rasterizer with EAN text overlay"
__license__ = "MIT"
__python_requires__ = ">=3.9"

# Компоненты семантической версии
VERSION_MAJOR = 0
VERSION_MINOR = 1
VERSION_PATCH = 0

if sys.version_info < (3, 9):
    raise RuntimeError(
        f"barcode_raster требует Python 3.9 или выше. "
        f"Текущая версия: {sys.version_info.major}."
        f"{sys.version_info.minor}.{sys.version_info.micro}"
    )

# =============================================================================
# КОНФИГУРАЦИЯ ЛОГИРОВАНИЯ
# =============================================================================

LOGGER_NAMESPACE = "barcode_raster"
LOG_LEVEL_ENV = "BARCODE_RASTER_LOG_LEVEL"
LOG_DIR_ENV = "BARCODE_RASTER_LOG_DIR"


def _setup_logging() -> None:
    """
    Инициализировать логирование пакета.

    Настраивает логгер ``barcode_raster`` с:
    - Консольным обработчиком (stderr) для WARNING и выше
    - Ротирующим файловым обработчиком для всех уровней, если задана
      переменная окружения BARCODE_RASTER_LOG_DIR
    - Форматом с временной меткой, уровнем, модулем и сообщением

    Уровень задаётся переменной BARCODE_RASTER_LOG_LEVEL
    (DEBUG, INFO, WARNING, ERROR, CRITICAL; по умолчанию INFO).

    Идемпотентна - повторные вызовы не имеют эффекта.
    """
    log_level_str = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    log_level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    log_level = log_level_map.get(log_level_str, logging.INFO)

    root_logger = logging.getLogger(LOGGER_NAMESPACE)
    if root_logger.handlers:
        return

    root_logger.setLevel(log_level)

    formatter = logging.Formatter(
        fmt=("[%(asctime)s] %(levelname)-8s " "[%(name)s.%(funcName)s:%(lineno)d] %(message)s"),
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    log_dir_str = os.environ.get(LOG_DIR_ENV)
    if log_dir_str:
        try:
            log_dir = Path(log_dir_str)
            log_dir.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                filename=log_dir / "barcode_raster.log",
                maxBytes=10 * 1024 * 1024,  # 10 МБ
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
        except OSError as e:
            root_logger.warning(
                "Не удалось инициализировать файловое логирование: %s. "
                "Используется только консоль.",
                e,
            )

    root_logger.propagate = False


def get_logger(module_name: str) -> logging.Logger:
    """
    Получить логгер в пространстве имён ``barcode_raster``.

    Аргументы:
        module_name: Имя модуля, обычно ``__name__``.

    Возвращает:
        logging.Logger с именем ``barcode_raster.<module_name>``
        (или ``module_name``, если он уже в пространстве имён).

    Пример:
        >>> get_logger("tools.preview").name
        'barcode_raster.tools.preview'
        >>> get_logger("__main__").name
        'barcode_raster.main'
    """
    if module_name == LOGGER_NAMESPACE or module_name.startswith(LOGGER_NAMESPACE + "."):
        full_name = module_name
    elif module_name == "__main__":
        full_name = f"{LOGGER_NAMESPACE}.main"
    else:
        clean_name = module_name.lstrip(".")
        full_name = f"{LOGGER_NAMESPACE}.{clean_name}"
    return logging.getLogger(full_name)


# =============================================================================
# УПРАВЛЕНИЕ КОНФИГУРАЦИЕЙ
# =============================================================================

DEFAULT_CONFIG_FILE = "barcode_raster.json"

# Значения конфигурации по умолчанию (совпадают с RenderConfig)
_DEFAULT_CONFIG: Dict[str, Any] = {
    "pixel_size": 10,
    "bar_height_1d": 40,
    "image_format": "png",
    "jpeg_quality": 75,
    "include_ean_text": False,
    "ean_font_family": None,
    "content_margin": 10,
}


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Загрузить конфигурацию из JSON-файла или использовать значения по умолчанию.

    Если файл отсутствует, содержит недопустимый JSON или не JSON-объект,
    возвращается конфигурация по умолчанию с записью предупреждения в лог.
    Проверка значений выполняется в ``RenderConfig.from_mapping``.

    Аргументы:
        config_path: Путь к файлу. Если None, ищет 'barcode_raster.json'
                    в текущем каталоге.

    Возвращает:
        Словарь со всеми ключами по умолчанию, переопределёнными
        пользовательскими значениями.

    Пример:
        >>> cfg = load_config(Path("render.json"))
        >>> RenderConfig.from_mapping(cfg).pixel_size
        10
    """
    logger = get_logger(__name__)

    if config_path is None:
        config_path = Path(DEFAULT_CONFIG_FILE)

    config = _DEFAULT_CONFIG.copy()

    if not config_path.exists():
        logger.info(
            "Файл конфигурации %s не найден. Используется конфигурация по умолчанию.",
            config_path,
        )
        return config

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            user_config = json.load(f)

        if not isinstance(user_config, dict):
            raise ValueError(
                f"Файл конфигурации должен содержать JSON-объект, "
                f"получен {type(user_config).__name__}"
            )

        config.update(user_config)
        logger.info("Конфигурация загружена из %s", config_path)
        logger.debug("Конфигурация: %s", config)

    except json.JSONDecodeError as e:
        logger.warning(
            "Не удалось разобрать %s: недопустимый JSON в строке %d, столбце %d. "
            "Используется конфигурация по умолчанию.",
            config_path,
            e.lineno,
            e.colno,
        )
    except OSError as e:
        logger.warning(
            "Не удалось прочитать %s: %s. Используется конфигурация по умолчанию.",
            config_path,
            e,
        )
    except ValueError as e:
        logger.warning(
            "Недопустимый формат конфигурации: %s. Используется конфигурация по умолчанию.",
            e,
        )

    return config


def check_dependencies() -> Dict[str, bool]:
    """
    Проверить, установлены ли зависимости.

    Не вызывает исключений для отсутствующих пакетов - возвращает
    словарь состояний.

    Проверяемые зависимости:
        - pillow: растеризация и кодирование изображений
        - reportlab: 1D- и DataMatrix-источники сеток
        - qrcode: QR-источник сеток

    Пример:
        >>> deps = check_dependencies()
        >>> deps["pillow"]
        True
    """
    import importlib.util

    modules = {
        "pillow": "PIL",
        "reportlab": "reportlab",
        "qrcode": "qrcode",
    }
    return {name: importlib.util.find_spec(mod) is not None for name, mod in modules.items()}


# =============================================================================
# ПУБЛИЧНЫЙ API
# =============================================================================

# Импорты размещены после утилит, чтобы логирование было настроено первым.

_setup_logging()

from .model.enums import BarcodeType, FontStyle, ImageFormat, Matrix2DCodeType  # noqa: E402
from .model.symbol import Barcode, BarcodeMetadata, BarcodeSymbol, ModuleGrid  # noqa: E402
from .rasterizer import (  # noqa: E402
    CanvasSizeError,
    ConfigurationError,
    ContentLengthMismatchError,
    EncodeError,
    FontNotFoundError,
    ImageRenderer,
    InvalidShapeError,
    Layout,
    RasterError,
    RenderConfig,
    RenderError,
    RenderReport,
    SymbolEncodeError,
    layout,
)
from .sources import encode_linear, encode_matrix, encode_symbol  # noqa: E402

__all__ = [
    # Метаданные версии
    "__version__",
    "__author__",
    "__description__",
    "__license__",
    "__python_requires__",
    "VERSION_MAJOR",
    "VERSION_MINOR",
    "VERSION_PATCH",
    # Утилиты
    "get_logger",
    "load_config",
    "check_dependencies",
    # Модель
    "BarcodeType",
    "Matrix2DCodeType",
    "ImageFormat",
    "FontStyle",
    "ModuleGrid",
    "Barcode",
    "BarcodeMetadata",
    "BarcodeSymbol",
    # Растеризация
    "ImageRenderer",
    "RenderReport",
    "RenderConfig",
    "Layout",
    "layout",
    # Источники
    "encode_symbol",
    "encode_linear",
    "encode_matrix",
    # Ошибки
    "RasterError",
    "ConfigurationError",
    "RenderError",
    "InvalidShapeError",
    "CanvasSizeError",
    "ContentLengthMismatchError",
    "FontNotFoundError",
    "EncodeError",
    "SymbolEncodeError",
]

_logger = get_logger(__name__)
_logger.debug("barcode_raster v%s инициализирован", __version__)
