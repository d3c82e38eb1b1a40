"""Data classes for component identification."""

from dataclasses import dataclass
from typing import Any, ClassVar, Literal, Union

UNKNOWN_TYPE = "unknown"


@dataclass(frozen=True)
class Label:
    """An object label from the vision service."""
    name: str
    confidence: float  # 0-100

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> "Label":
        """Build from a vision API label ({"Name", "Confidence"}) or a plain {"name", "confidence"} dict."""
        return cls(
            name=raw["Name"] if "Name" in raw else raw["name"],
            confidence=float(raw["Confidence"] if "Confidence" in raw else raw["confidence"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "confidence": self.confidence}


@dataclass(frozen=True)
class TextDetection:
    """A raw text detection, either a whole line or a single word."""
    text: str
    confidence: float
    granularity: Literal["LINE", "WORD"]

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> "TextDetection":
        """Build from a vision API detection ({"DetectedText", "Confidence", "Type"})."""
        if "DetectedText" in raw:
            return cls(
                text=raw["DetectedText"],
                confidence=float(raw["Confidence"]),
                granularity=raw["Type"],
            )
        return cls(
            text=raw["text"],
            confidence=float(raw["confidence"]),
            granularity=raw.get("granularity", raw.get("type", "LINE")),
        )

    @property
    def is_line(self) -> bool:
        return self.granularity == "LINE"


@dataclass(frozen=True)
class TextLine:
    """A line-level text detection. Word-level detections never become TextLines."""
    text: str
    confidence: float

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "confidence": self.confidence}


@dataclass(frozen=True)
class TypeMatch:
    """A candidate component type and the label that produced it."""
    type: str
    confidence: float
    matched_label: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "confidence": self.confidence,
            "matched_label": self.matched_label,
        }


@dataclass(frozen=True)
class ResistorAnalysis:
    kind: ClassVar[str] = "resistor"

    has_color_bands: bool = False
    detected_colors: tuple[str, ...] = ()
    estimated_value: str | None = None
    note: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "has_color_bands": self.has_color_bands,
            "detected_colors": list(self.detected_colors),
            "estimated_value": self.estimated_value,
        }
        if self.note is not None:
            data["note"] = self.note
        return data


@dataclass(frozen=True)
class CapacitorAnalysis:
    kind: ClassVar[str] = "capacitor"

    estimated_value: str | None = None
    voltage: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"estimated_value": self.estimated_value, "voltage": self.voltage}


@dataclass(frozen=True)
class ICAnalysis:
    kind: ClassVar[str] = "ic"

    part_numbers: tuple[str, ...] = ()
    manufacturers: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "part_numbers": list(self.part_numbers),
            "manufacturers": list(self.manufacturers),
        }


# Tagged by each variant's `kind`
ComponentAnalysis = Union[ResistorAnalysis, CapacitorAnalysis, ICAnalysis]


@dataclass(frozen=True)
class IdentificationResult:
    """Structured identification of a single component image.

    `type` is "unknown" with zero confidence when no label matched any
    component keyword. `analysis` is only set for types with an extractor.
    """
    type: str = UNKNOWN_TYPE
    confidence: float = 0.0
    possible_types: tuple[TypeMatch, ...] = ()
    detected_labels: tuple[Label, ...] = ()
    detected_text: tuple[TextLine, ...] = ()
    analysis: ComponentAnalysis | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready dict. `analysis` is keyed by variant kind, e.g. {"resistor": {...}}."""
        return {
            "type": self.type,
            "confidence": self.confidence,
            "possible_types": [m.to_dict() for m in self.possible_types],
            "detected_labels": [label.to_dict() for label in self.detected_labels],
            "detected_text": [line.to_dict() for line in self.detected_text],
            "analysis": {self.analysis.kind: self.analysis.to_dict()} if self.analysis else {},
        }
