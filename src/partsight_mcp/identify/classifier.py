"""Component type classification from vision labels."""

from collections.abc import Sequence

from .models import Label, TypeMatch
from .rules import TYPE_KEYWORDS


def _first_matching_label(labels: Sequence[Label], keywords: tuple[str, ...]) -> Label | None:
    for label in labels:
        name_lower = label.name.lower()
        if any(keyword in name_lower for keyword in keywords):
            return label
    return None


def classify_labels(labels: Sequence[Label]) -> list[TypeMatch]:
    """Rank candidate component types for a set of labels.

    Each type is matched by the first label (in input order) containing one of
    its keywords, even if a later label for the same type is more confident.
    A single label can match several types.

    Args:
        labels: Labels in the order the vision service returned them

    Returns:
        One TypeMatch per matched type, highest confidence first. Ties keep
        keyword table order.
    """
    matches = []
    for component_type, keywords in TYPE_KEYWORDS.items():
        label = _first_matching_label(labels, keywords)
        if label is not None:
            matches.append(TypeMatch(
                type=component_type,
                confidence=label.confidence,
                matched_label=label.name,
            ))

    # sorted() is stable, also with reverse=True
    return sorted(matches, key=lambda m: m.confidence, reverse=True)
