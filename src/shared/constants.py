from __future__ import annotations

# Размер тайла удалённого источника по одной стороне (px)
TILE_SIZE = 1000

# Уровень приближения по умолчанию
DEFAULT_ZOOM = 11

# Базовый адрес сайта с архивом снимков
SITE_BASE_URL = 'https://wplace.eralyon.net'

# Шаблон пути тайла относительно SITE_BASE_URL
TILE_PATH_TEMPLATE = '/tiles/{version}/{zoom}/{x}/{y}.png'

# Префикс версии в URL и в имени файла кэша
VERSION_PREFIX = 'v'

# Разделитель base.diff в идентификаторе версии
VERSION_LAYER_SEPARATOR = '.'

# Регулярное выражение для поиска версий на странице сайта
VERSION_PATTERN = r"version:\s*'([^']+)'"

# Пути по умолчанию
DEFAULT_VERSIONS_FILE = 'versions.txt'
DEFAULT_OUTPUT_PATH = 'heatmap.png'
DEFAULT_CACHE_DIR = 'tile_cache'

# Шаблон имени файла в кэше тайлов
CACHE_FILE_TEMPLATE = '{version}_{zoom}_{x}_{y}.png'

# Разделители в строках координат
COORD_FIELD_SEPARATOR = '-'
TILE_RANGE_SEPARATOR = '_'

# Число полей в форматах fullsize
FULLSIZE_FIELDS_SHORT = 6
FULLSIZE_FIELDS_LONG = 8

# Таймаут HTTP-запроса (секунды)
HTTP_TIMEOUT_DEFAULT = 30.0

HTTP_OK = 200

# Градиент тепловой карты: (доля от максимума, (R, G, B))
GRADIENT_STOPS: tuple[tuple[float, tuple[int, int, int]], ...] = (
    (0.0, (0, 0, 0)),
    (0.25, (0, 0, 255)),
    (0.5, (0, 255, 0)),
    (0.75, (255, 255, 0)),
    (1.0, (255, 0, 0)),
)

# Цвет пикселя без изменений (RGBA)
ZERO_CHANGE_COLOR = (0, 0, 0, 255)

# Формат логов
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_LEVEL_DEFAULT = 'INFO'

# Заголовок User-Agent для HTTP-запросов
USER_AGENT = 'wplace-heatmap/1.0'
