"""Component identification from vision analysis output.

Turns object labels and detected text lines into a typed identification:
- Labels ["Resistor", "Red", "Brown"] -> resistor, color bands Red/Brown
- Text ["10uF", "16V", "22uF"] on a capacitor -> 22uF, 16V (last match wins)
- Text ["LM358"] on a chip -> part number LM358, "Likely LM series"

Key pieces:
1. Keyword classification of labels into canonical component types
2. Per-category extractors (resistor, capacitor, integrated circuit)
3. A fixed-format summary renderer

Everything here is synchronous and stateless; no I/O happens in this package.
"""

from .classifier import classify_labels
from .engine import identify_component, interpret_detections, to_text_lines
from .extractors import ScanPolicy, analyze_capacitor, analyze_ic, analyze_resistor, scan_lines
from .models import (
    UNKNOWN_TYPE,
    CapacitorAnalysis,
    ComponentAnalysis,
    ICAnalysis,
    IdentificationResult,
    Label,
    ResistorAnalysis,
    TextDetection,
    TextLine,
    TypeMatch,
)
from .rules import MANUFACTURER_PREFIXES, RESISTOR_COLORS, TYPE_KEYWORDS
from .summary import generate_identification_summary

__all__ = [
    # Main API
    "identify_component",
    "interpret_detections",
    "generate_identification_summary",
    # Data classes
    "Label",
    "TextDetection",
    "TextLine",
    "TypeMatch",
    "ResistorAnalysis",
    "CapacitorAnalysis",
    "ICAnalysis",
    "ComponentAnalysis",
    "IdentificationResult",
    "UNKNOWN_TYPE",
    # Rule tables
    "TYPE_KEYWORDS",
    "RESISTOR_COLORS",
    "MANUFACTURER_PREFIXES",
    # Building blocks
    "classify_labels",
    "analyze_resistor",
    "analyze_capacitor",
    "analyze_ic",
    "scan_lines",
    "ScanPolicy",
    "to_text_lines",
]
