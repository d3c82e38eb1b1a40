"""Category-specific attribute extraction from detected text."""

import re
from collections.abc import Callable, Sequence
from enum import Enum

from .models import CapacitorAnalysis, ICAnalysis, Label, ResistorAnalysis, TextLine
from .rules import (
    CAPACITANCE_PATTERN,
    COLOR_BAND_MIN_LABELS,
    COLOR_BAND_NOTE,
    MANUFACTURER_PREFIXES,
    PART_NUMBER_PATTERN,
    RESISTANCE_PATTERN,
    RESISTOR_COLORS,
    VOLTAGE_PATTERN,
)


class ScanPolicy(Enum):
    """Which match wins when several text lines match the same pattern."""
    FIRST_MATCH = "first"
    LAST_MATCH = "last"


def scan_lines(
    lines: Sequence[TextLine],
    pattern: re.Pattern,
    policy: ScanPolicy,
    render: Callable[[re.Match], str],
) -> str | None:
    """Search each line for pattern and render the winning match.

    FIRST_MATCH stops at the first line that matches. LAST_MATCH visits every
    line and keeps overwriting, so the last matching line wins.

    Returns:
        Rendered value, or None if no line matched
    """
    value = None
    for line in lines:
        match = pattern.search(line.text)
        if match:
            value = render(match)
            if policy is ScanPolicy.FIRST_MATCH:
                break
    return value


def analyze_resistor(labels: Sequence[Label], lines: Sequence[TextLine]) -> ResistorAnalysis:
    """Detect color bands from labels and a printed resistance value from text.

    Args:
        labels: Vision labels (color names like "Red" count as bands)
        lines: Line-level text detections

    Returns:
        ResistorAnalysis. Value is "<number><multiplier>Ω" from the first matching line.
    """
    color_labels = [
        label for label in labels
        if any(color in label.name.lower() for color in RESISTOR_COLORS)
    ]
    has_color_bands = len(color_labels) >= COLOR_BAND_MIN_LABELS

    estimated_value = scan_lines(
        lines,
        RESISTANCE_PATTERN,
        ScanPolicy.FIRST_MATCH,
        lambda m: f"{m.group(1)}{m.group(2)}Ω",
    )

    return ResistorAnalysis(
        has_color_bands=has_color_bands,
        detected_colors=tuple(label.name for label in color_labels) if has_color_bands else (),
        estimated_value=estimated_value,
        note=COLOR_BAND_NOTE if has_color_bands else None,
    )


def analyze_capacitor(lines: Sequence[TextLine]) -> CapacitorAnalysis:
    """Extract capacitance and rated voltage. The last matching line wins for each field."""
    return CapacitorAnalysis(
        estimated_value=scan_lines(
            lines,
            CAPACITANCE_PATTERN,
            ScanPolicy.LAST_MATCH,
            lambda m: f"{m.group(1)}{m.group(2)}",
        ),
        voltage=scan_lines(
            lines,
            VOLTAGE_PATTERN,
            ScanPolicy.LAST_MATCH,
            lambda m: f"{m.group(1)}V",
        ),
    )


def analyze_ic(lines: Sequence[TextLine]) -> ICAnalysis:
    """Collect part-number-like lines and IC family hints.

    Both checks run on every line and duplicates are kept. The family hint
    looks at the first two characters of the raw line (before trimming).
    """
    part_numbers = []
    manufacturers = []

    for line in lines:
        text = line.text.strip()
        if PART_NUMBER_PATTERN.fullmatch(text):
            part_numbers.append(text)

        prefix = line.text[:2].upper()
        if prefix in MANUFACTURER_PREFIXES:
            manufacturers.append(f"Likely {prefix} series")

    return ICAnalysis(part_numbers=tuple(part_numbers), manufacturers=tuple(manufacturers))
