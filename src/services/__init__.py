"""Services package - version sources, gradient helpers and the heatmap run.

services.heatmap_service is imported directly by callers; it depends on
imaging, which itself uses services.color_utils.
"""

from services.color_utils import gradient_color, gradient_rgb, lerp
from services.versions import (
    VersionSourceError,
    fetch_versions_from_site,
    load_versions,
    parse_versions_text,
    read_versions_file,
)

__all__ = [
    'VersionSourceError',
    'fetch_versions_from_site',
    'gradient_color',
    'gradient_rgb',
    'lerp',
    'load_versions',
    'parse_versions_text',
    'read_versions_file',
]
