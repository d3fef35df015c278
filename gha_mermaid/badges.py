"""Condition badges: the decision nodes drawn for each guard atom.

Recognized status functions get a rounded "stadium" badge in their own colour;
a negated one (`!failure()`) keeps the icon but is drawn white with a dashed
outline and a "NOT" prefix. Anything else is a grey diamond showing the raw
guard text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .constants import ALWAYS_CONDITION
from .mermaid_fmt import escape_label, mm_class_def


@dataclass(frozen=True)
class ConditionStyle:
    icon: str
    label: str
    class_name: str
    fill: str
    stroke: str

    @property
    def negated_class_name(self) -> str:
        return f"{self.class_name}Neg"


CONDITION_STYLES: dict[str, ConditionStyle] = {
    "always()": ConditionStyle("🔄", "Always Run", "condAlways", "#4A90D9", "#2E6EB5"),
    "success()": ConditionStyle("✅", "Success Only", "condSuccess", "#28A745", "#1E7E34"),
    "failure()": ConditionStyle("❌", "Failure Only", "condFailure", "#DC3545", "#BD2130"),
    "cancelled()": ConditionStyle("⛔", "Cancelled", "condCancelled", "#FD7E14", "#E36209"),
}

# Custom guards show their own text, so the label is unused.
CUSTOM_CONDITION_STYLE = ConditionStyle("🔧", "", "condCustom", "#6C757D", "#545B62")


def parse_negation(cond_text: str) -> tuple[bool, str]:
    """Split a leading "!" off `cond_text`; returns (negated, inner)."""
    trimmed = cond_text.strip()
    if trimmed.startswith("!"):
        return True, trimmed[1:].strip()
    return False, trimmed


def classify(cond_text: str) -> tuple[Optional[ConditionStyle], bool]:
    """Look up the badge style for one guard atom.

    Returns (style, negated). `style` is None for custom guards; callers then
    use CUSTOM_CONDITION_STYLE and ignore the negation flag.
    """
    negated, inner = parse_negation(cond_text)
    return CONDITION_STYLES.get(inner), negated


def is_always_condition(cond_text: str) -> bool:
    """True only for an unnegated `always()`; `!always()` can still fail."""
    negated, inner = parse_negation(cond_text)
    return not negated and inner == ALWAYS_CONDITION


def format_condition_node(cond_id: str, cond_text: str, indent: str = "  ") -> str:
    """Mermaid definition line for one badge node."""
    style, negated = classify(cond_text)

    if style is not None:
        if negated:
            return (
                f'{indent}{cond_id}(["{style.icon} NOT {style.label}"])'
                f":::{style.negated_class_name}"
            )
        return f'{indent}{cond_id}(["{style.icon} {style.label}"]):::{style.class_name}'

    custom = CUSTOM_CONDITION_STYLE
    return (
        f'{indent}{cond_id}{{"{custom.icon} {escape_label(cond_text)}"}}'
        f":::{custom.class_name}"
    )


def condition_class_defs() -> list[str]:
    """classDef lines for every badge class, appended at the end of a diagram."""
    lines: list[str] = []
    for style in CONDITION_STYLES.values():
        lines.append(
            mm_class_def(style.class_name, fill=style.fill, stroke=style.stroke, color="#fff")
        )
        # Negated: outline only.
        lines.append(
            mm_class_def(
                style.negated_class_name,
                fill="#fff",
                stroke=style.stroke,
                color=style.fill,
                stroke_dasharray="5 5",
                stroke_width="2px",
            )
        )
    custom = CUSTOM_CONDITION_STYLE
    lines.append(
        mm_class_def(custom.class_name, fill=custom.fill, stroke=custom.stroke, color="#fff")
    )
    return lines
