"""Slot extraction for layout composition.

Rendered content may tag regions with ``<!-- slot:NAME -->`` markers.
A region runs from its marker to the next marker or the end of input.
Layouts receive the regions as ``slots`` and the primary content as
``slot``.
"""

import re
from dataclasses import dataclass, field

SLOT_MARKER_RE = re.compile(r"<!--\s*slot:(\w+)\s*-->")

# Slot name a layout treats as its primary insertion point
DEFAULT_SLOT = "default"


@dataclass(frozen=True, slots=True)
class SlotParse:
    """Result of ``parse_slots``."""

    slots: dict[str, str] = field(default_factory=dict)
    content: str = ""

    @property
    def primary(self) -> str:
        """The default slot if one was captured, else the residual content."""
        return self.slots.get(DEFAULT_SLOT) or self.content


def parse_slots(text: str) -> SlotParse:
    """Split *text* into named slots and residual content.

    Single left-to-right scan; markers do not nest. A region whose
    trimmed text is empty is not captured, and its marker stays in the
    residual content. Later regions with the same name win.

    >>> parse_slots("<!-- slot:header -->Hi<!-- slot:footer -->Bye").slots
    {'header': 'Hi', 'footer': 'Bye'}
    """
    slots: dict[str, str] = {}
    residual: list[str] = []
    markers = list(SLOT_MARKER_RE.finditer(text))
    last = 0

    for i, marker in enumerate(markers):
        end = markers[i + 1].start() if i + 1 < len(markers) else len(text)
        region = text[marker.end() : end].strip()
        if not region:
            continue
        residual.append(text[last : marker.start()])
        slots[marker.group(1)] = region
        last = end

    residual.append(text[last:])
    return SlotParse(slots=slots, content="".join(residual).strip())
