"""Command line entry point for the Wplace heatmap generator."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

from domain.models import HeatmapSettings
from domain.profiles import load_profile, save_profile
from services.heatmap_service import HeatmapService
from services.versions import VersionSourceError
from shared.constants import (
    DEFAULT_OUTPUT_PATH,
    LOG_FORMAT,
    LOG_LEVEL_DEFAULT,
    SITE_BASE_URL,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1

# CLI-флаг -> поле HeatmapSettings
_FLAG_TO_FIELD = {
    'zoom': 'zoom',
    'fullsize': 'fullsize',
    'tiles': 'tile_range',
    'tile': 'single_tile',
    'vfile': 'versions_file',
    'out': 'output_path',
    'cache': 'cache_dir',
    'auto': 'auto_fetch',
    'site': 'site_url',
    'timeout': 'http_timeout_s',
}
_REGION_FIELDS = ('fullsize', 'tile_range', 'single_tile')


def setup_logging(level: str = LOG_LEVEL_DEFAULT, log_file: str | Path | None = None) -> None:
    """Configure root logging to stdout and, optionally, a UTF-8 log file."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(str(log_path), encoding='utf-8'))
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='wplace-heatmap',
        description='Per-pixel change heatmap over archived map tile versions',
    )
    parser.add_argument('--zoom', type=int, help='Zoom level (default 11)')
    parser.add_argument(
        '--fullsize',
        help='Fullsize range: tileX-tileY-pixelX-pixelY-width-height '
        'or two corners tileX-tileY-pixelX-pixelY-tileX-tileY-pixelX-pixelY',
    )
    parser.add_argument('--tiles', help='Tile range mode (minX-minY_maxX-maxY)')
    parser.add_argument('--tile', help='Single tile mode (tileX-tileY)')
    parser.add_argument('--vfile', help='Versions file (default versions.txt)')
    parser.add_argument('--out', help='Output filename (default heatmap.png)')
    parser.add_argument('--cache', help='Tile cache directory (default tile_cache)')
    parser.add_argument(
        '--auto',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Fetch versions from the site (falls back to --vfile on failure)',
    )
    parser.add_argument('--site', help=f'Site base URL (default {SITE_BASE_URL})')
    parser.add_argument('--timeout', type=float, help='HTTP timeout in seconds')
    parser.add_argument('--profile', help='TOML profile to start from (name or path)')
    parser.add_argument('--save-profile', help='Save the effective settings to this profile')
    parser.add_argument('--log-level', default=LOG_LEVEL_DEFAULT, help='Logging level')
    parser.add_argument('--log-file', help='Also write logs to this file')
    return parser


def settings_from_args(args: argparse.Namespace) -> HeatmapSettings:
    """Profile (if any) first, explicit flags override it."""
    base = load_profile(args.profile) if args.profile else HeatmapSettings()
    data = base.model_dump()
    overrides = {
        field: getattr(args, flag)
        for flag, field in _FLAG_TO_FIELD.items()
        if getattr(args, flag) is not None
    }
    if any(f in overrides for f in _REGION_FIELDS):
        # Область из командной строки заменяет область профиля
        for f in _REGION_FIELDS:
            data[f] = None
    data.update(overrides)
    return HeatmapSettings.model_validate(data)


def interactive_settings(
    input_fn: Callable[[str], str] = input,
    print_fn: Callable[..., None] = print,
) -> HeatmapSettings | None:
    """Prompt for the run parameters; None when the mode choice is invalid."""
    print_fn('=== Wplace Heatmap Generator (Interactive Mode) ===')
    data: dict = {}

    auto = input_fn(f'Fetch versions automatically from {SITE_BASE_URL}? [Y/n]: ')
    data['auto_fetch'] = auto.strip().lower() != 'n'

    print_fn('Select Coordinate Mode:')
    print_fn('1. Fullsize (6 parts: tileX-tileY-pixelX-pixelY-width-height)')
    print_fn('2. Fullsize (8 parts: tileX1-tileY1-pixelX1-pixelY1-tileX2-tileY2-pixelX2-pixelY2)')
    print_fn('3. Tile Range (minTX-minTY_maxTX-maxTY)')
    print_fn('4. Single Tile (tileX-tileY)')
    choice = input_fn('Choice [1-4]: ').strip()

    if choice in ('1', '2'):
        data['fullsize'] = input_fn('Enter coordinate string: ').strip()
    elif choice == '3':
        data['tile_range'] = input_fn('Enter tile range (e.g. 1818-806_1819-806): ').strip()
    elif choice == '4':
        data['single_tile'] = input_fn('Enter tile (e.g. 1818-806): ').strip()
    else:
        print_fn('Invalid choice, exiting.')
        return None

    out = input_fn(f'Output filename [{DEFAULT_OUTPUT_PATH}]: ').strip()
    if out:
        data['output_path'] = out
    return HeatmapSettings.model_validate(data)


def main(argv: Sequence[str] | None = None) -> int:
    """Main application entry point."""
    argv = list(sys.argv[1:] if argv is None else argv)
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    try:
        if argv:
            settings = settings_from_args(args)
        else:
            settings = interactive_settings()
            if settings is None:
                return EXIT_FAILURE
        if args.save_profile:
            save_profile(args.save_profile, settings)

        service = HeatmapService(settings)
        result = asyncio.run(service.run())
    except (ValueError, FileNotFoundError) as e:
        logger.error('Input error: %s', e)
        return EXIT_FAILURE
    except VersionSourceError as e:
        logger.error('Version list unavailable: %s', e)
        return EXIT_FAILURE
    except OSError as e:
        logger.error('Failed to write heatmap: %s', e)
        return EXIT_FAILURE

    print(f'Done! Saved to {result.output_path} (Max changes: {result.max_count})')
    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
