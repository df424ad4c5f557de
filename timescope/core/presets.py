"""Preset zoom ranges (1W / 1M / 3M / 1Y)."""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .time_window import MS_PER_DAY, ZoomLabel


@dataclass(frozen=True)
class PresetDefinition:
    code: str
    duration_ms: float
    label: str
    zoom_label: ZoomLabel


PRESETS: Tuple[PresetDefinition, ...] = (
    PresetDefinition('1W', 7 * MS_PER_DAY, '1 Week', ZoomLabel.WEEK),
    PresetDefinition('1M', 30 * MS_PER_DAY, '1 Month', ZoomLabel.MONTH),
    PresetDefinition('3M', 90 * MS_PER_DAY, '3 Months', ZoomLabel.QUARTER),
    PresetDefinition('1Y', 365 * MS_PER_DAY, '1 Year', ZoomLabel.YEAR),
)

# Lookup by code or by zoom label name ('week', 'month', ...), case-insensitive
_BY_KEY: Dict[str, PresetDefinition] = {}
for _preset in PRESETS:
    _BY_KEY[_preset.code.lower()] = _preset
    _BY_KEY[_preset.zoom_label.value] = _preset


def resolve_preset(code: str) -> Optional[PresetDefinition]:
    """Find a preset by code ('1W') or alias ('week'). None if unknown."""
    if not isinstance(code, str):
        return None
    return _BY_KEY.get(code.strip().lower())


def preset_for_label(label: ZoomLabel) -> Optional[PresetDefinition]:
    """The preset whose zoom label is ``label``, if any."""
    return _BY_KEY.get(label.value) if label is not ZoomLabel.CUSTOM else None
