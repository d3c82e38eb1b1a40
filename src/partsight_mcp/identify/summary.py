"""Human-readable identification summary."""

from .models import CapacitorAnalysis, ICAnalysis, IdentificationResult, ResistorAnalysis
from .rules import CAPACITOR, INTEGRATED_CIRCUIT, RESISTOR


def generate_identification_summary(result: IdentificationResult) -> str:
    """Render a result as a short multi-line report.

    First line is always "Identified as: <type> (<confidence>% confidence)"
    with one decimal place. Detail lines follow only for analyzed types.
    """
    lines = [f"Identified as: {result.type} ({result.confidence:.1f}% confidence)"]
    analysis = result.analysis

    if result.type == RESISTOR and isinstance(analysis, ResistorAnalysis):
        # Printed value beats color bands
        if analysis.estimated_value:
            lines.append(f"Estimated value: {analysis.estimated_value}")
        elif analysis.has_color_bands:
            lines.append(f"Color bands detected: {', '.join(analysis.detected_colors)}")
    elif result.type == CAPACITOR and isinstance(analysis, CapacitorAnalysis):
        if analysis.estimated_value:
            lines.append(f"Estimated value: {analysis.estimated_value}")
        if analysis.voltage:
            lines.append(f"Rated voltage: {analysis.voltage}")
    elif result.type == INTEGRATED_CIRCUIT and isinstance(analysis, ICAnalysis):
        if analysis.part_numbers:
            lines.append(f"Detected part numbers: {', '.join(analysis.part_numbers)}")

    return "\n".join(lines)
