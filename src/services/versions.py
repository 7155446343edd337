"""
Источники списка версий.

Версии берутся либо со страницы сайта (поиск шаблона version: '...'),
либо из текстового файла: по одной версии в строке, пустые строки и
строки, начинающиеся с '#', пропускаются. При ошибке сайта допускается
откат на файл, но не наоборот.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING

import aiohttp

from shared.constants import HTTP_OK, HTTP_TIMEOUT_DEFAULT, VERSION_PATTERN

if TYPE_CHECKING:
    from domain.models import HeatmapSettings

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(VERSION_PATTERN)


class VersionSourceError(RuntimeError):
    """No usable version list could be obtained."""


def parse_versions_text(text: str) -> list[str]:
    versions = []
    for raw in text.splitlines():
        line = raw.strip()
        if line and not line.startswith('#'):
            versions.append(line)
    return versions


def read_versions_file(path: str | Path) -> list[str]:
    try:
        text = Path(path).read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        msg = f'Failed to read versions from file {path}: {e}'
        raise VersionSourceError(msg) from e
    return parse_versions_text(text)


def extract_versions_from_html(html: str) -> list[str]:
    """All version tokens in document order (duplicates kept)."""
    return _VERSION_RE.findall(html)


async def fetch_versions_from_site(
    client: aiohttp.ClientSession,
    site_url: str,
    timeout_s: float = HTTP_TIMEOUT_DEFAULT,
) -> list[str]:
    url = site_url.rstrip('/') + '/'
    timeout = aiohttp.ClientTimeout(total=timeout_s)
    try:
        async with client.get(url, timeout=timeout) as resp:
            if resp.status != HTTP_OK:
                msg = f'HTTP {resp.status} for {url}'
                raise VersionSourceError(msg)
            # Невалидные байты UTF-8 на странице заменяются, а не роняют загрузку
            html = (await resp.read()).decode('utf-8', errors='replace')
    except (TimeoutError, aiohttp.ClientError) as e:
        msg = f'Request failed for {url}: {e or type(e).__name__}'
        raise VersionSourceError(msg) from e

    versions = extract_versions_from_html(html)
    if not versions:
        msg = 'no versions found in site HTML'
        raise VersionSourceError(msg)
    return versions


async def load_versions(
    settings: HeatmapSettings,
    client: aiohttp.ClientSession,
) -> list[str]:
    """Versions from the site when auto_fetch is on, otherwise (or on failure) from the file."""
    if settings.auto_fetch:
        logger.info('Fetching versions from %s', settings.site_url)
        try:
            versions = await fetch_versions_from_site(
                client, settings.site_url, settings.http_timeout_s
            )
        except VersionSourceError as e:
            logger.warning('Auto-fetch failed: %s. Falling back to %s', e, settings.versions_file)
        else:
            logger.info('Found %d versions on the site', len(versions))
            return versions

    versions = read_versions_file(settings.versions_file)
    if not versions:
        msg = f'No versions listed in {settings.versions_file}'
        raise VersionSourceError(msg)
    logger.info('Read %d versions from %s', len(versions), settings.versions_file)
    return versions
