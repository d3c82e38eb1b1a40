"""Assemble an IdentificationResult from vision labels and text."""

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from .classifier import classify_labels
from .extractors import analyze_capacitor, analyze_ic, analyze_resistor
from .models import (
    ComponentAnalysis,
    IdentificationResult,
    Label,
    TextDetection,
    TextLine,
)
from .rules import CAPACITOR, INTEGRATED_CIRCUIT, RESISTOR

logger = logging.getLogger(__name__)


def _analyze(component_type: str, labels: Sequence[Label], lines: Sequence[TextLine]) -> ComponentAnalysis | None:
    """Run the extractor for component_type, or return None if it has none."""
    if component_type == RESISTOR:
        return analyze_resistor(labels, lines)
    if component_type == CAPACITOR:
        return analyze_capacitor(lines)
    if component_type == INTEGRATED_CIRCUIT:
        return analyze_ic(lines)
    return None


def identify_component(labels: Sequence[Label], lines: Sequence[TextLine]) -> IdentificationResult:
    """Identify a component from already-resolved labels and line text.

    Only the top-ranked type is analyzed; runner-up types in possible_types
    get no extractor run. No labels (or no matching labels) gives "unknown".

    Args:
        labels: Labels, already confidence-filtered by the vision service
        lines: Line-level text detections

    Returns:
        IdentificationResult with the raw evidence attached
    """
    labels = tuple(labels)
    lines = tuple(lines)

    possible_types = tuple(classify_labels(labels))
    if not possible_types:
        logger.debug(f"No component type matched {len(labels)} labels")
        return IdentificationResult(detected_labels=labels, detected_text=lines)

    top = possible_types[0]
    logger.debug(
        f"Identified {top.type} ({top.confidence:.1f}%) from label {top.matched_label!r}, "
        f"{len(possible_types)} candidate types"
    )

    return IdentificationResult(
        type=top.type,
        confidence=top.confidence,
        possible_types=possible_types,
        detected_labels=labels,
        detected_text=lines,
        analysis=_analyze(top.type, labels, lines),
    )


def to_text_lines(detections: Iterable[TextDetection]) -> tuple[TextLine, ...]:
    """Keep LINE detections only. WORD detections duplicate the line text."""
    return tuple(TextLine(text=d.text, confidence=d.confidence) for d in detections if d.is_line)


def interpret_detections(
    labels: Iterable[Label | dict[str, Any]],
    text_detections: Iterable[TextDetection | dict[str, Any]],
) -> IdentificationResult:
    """Identify a component from raw vision API output.

    Accepts either model instances or API-shaped dicts, e.g.
    {"Name": "Resistor", "Confidence": 97.1} and
    {"DetectedText": "10K", "Confidence": 99.0, "Type": "LINE"}.

    Raises:
        KeyError: If a dict is missing a required field
    """
    parsed_labels = [item if isinstance(item, Label) else Label.from_api(item) for item in labels]
    parsed_text = [
        item if isinstance(item, TextDetection) else TextDetection.from_api(item)
        for item in text_detections
    ]
    return identify_component(parsed_labels, to_text_lines(parsed_text))
