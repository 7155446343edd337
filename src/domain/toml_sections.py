"""Раскладка плоских полей HeatmapSettings по секциям TOML-профиля.

Профиль хранится как:

    [common]
    zoom = 11

    [region]
    tiles = "1818-806_1819-807"

    [versions]
    file = "versions.txt"
    auto_fetch = true

Поля без своей секции попадают в [common]. При чтении принимается и
плоский TOML без секций.
"""

from __future__ import annotations

COMMON_SECTION = 'common'

# секция -> {поле модели: ключ в TOML}
SECTION_MAP: dict[str, dict[str, str]] = {
    'region': {
        'fullsize': 'fullsize',
        'tile_range': 'tiles',
        'single_tile': 'tile',
    },
    'versions': {
        'versions_file': 'file',
        'auto_fetch': 'auto_fetch',
        'site_url': 'site_url',
    },
    'output': {
        'output_path': 'path',
        'cache_dir': 'cache_dir',
    },
}

_FIELD_LOCATION = {
    field: (section, key)
    for section, fields in SECTION_MAP.items()
    for field, key in fields.items()
}
_KEY_TO_FIELD = {
    section: {key: field for field, key in fields.items()}
    for section, fields in SECTION_MAP.items()
}


def flat_to_sectioned(flat: dict) -> dict:
    """Flat settings dict -> {section: {key: value}} ready for tomlkit."""
    out: dict[str, dict] = {COMMON_SECTION: {}}
    for field, value in flat.items():
        section, key = _FIELD_LOCATION.get(field, (COMMON_SECTION, field))
        out.setdefault(section, {})[key] = value
    return out


def sectioned_to_flat(data: dict) -> dict:
    """Inverse of flat_to_sectioned; unknown sections are merged as is."""
    flat: dict = {}
    for name, value in data.items():
        if not isinstance(value, dict):
            flat[name] = value
            continue
        keys = _KEY_TO_FIELD.get(name, {})
        flat.update({keys.get(k, k): v for k, v in value.items()})
    return flat
