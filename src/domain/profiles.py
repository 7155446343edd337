"""TOML profiles for HeatmapSettings."""

from __future__ import annotations

import logging
from pathlib import Path

import tomlkit

from domain.models import HeatmapSettings
from domain.toml_sections import flat_to_sectioned, sectioned_to_flat

logger = logging.getLogger(__name__)

PROFILES_DIR = 'profiles'


def ensure_profiles_dir(profiles_dir: str | Path = PROFILES_DIR) -> Path:
    folder = Path(profiles_dir)
    folder.mkdir(parents=True, exist_ok=True)
    return folder


def profile_path(name: str, profiles_dir: str | Path = PROFILES_DIR) -> Path:
    return Path(profiles_dir) / f'{name}.toml'


def load_profile(
    name_or_path: str | Path,
    profiles_dir: str | Path = PROFILES_DIR,
) -> HeatmapSettings:
    """
    Загрузка и валидация профиля TOML -> HeatmapSettings.

    Принимает имя профиля (без .toml) из каталога профилей
    или путь до TOML файла.
    """
    p = Path(name_or_path)
    path = p if p.suffix.lower() == '.toml' else profile_path(str(name_or_path), profiles_dir)
    if not path.exists():
        msg = f'Profile not found: {path}'
        raise FileNotFoundError(msg)
    data = tomlkit.parse(path.read_text(encoding='utf-8')).unwrap()
    settings = HeatmapSettings.model_validate(sectioned_to_flat(data))
    logger.info('Profile loaded from %s', path)
    return settings


def save_profile(
    name_or_path: str | Path,
    settings: HeatmapSettings,
    profiles_dir: str | Path = PROFILES_DIR,
) -> Path:
    """Сохранение профиля в TOML (без атомарности и бэкапов)."""
    p = Path(name_or_path)
    if p.suffix.lower() == '.toml':
        path = p
        path.parent.mkdir(parents=True, exist_ok=True)
    else:
        path = ensure_profiles_dir(profiles_dir) / f'{name_or_path}.toml'
    # TOML не умеет None, незаданные поля пропускаются
    data = flat_to_sectioned(settings.model_dump(mode='json', exclude_none=True))
    path.write_text(tomlkit.dumps(data), encoding='utf-8')
    logger.info('Profile saved to %s', path)
    return path
