from __future__ import annotations

# Mermaid flowchart directions accepted by `flowchart <dir>`.
DIRECTIONS: tuple[str, ...] = ("TD", "TB", "LR", "RL", "BT")
DIRECTION_DEFAULT = "TD"

# Labels longer than this are cut (Mermaid renders them unwrapped).
LABEL_MAX_LEN = 80
STEP_LABEL_MAX_LEN = 60

# Trigger config keys summarized in the trigger node label, in display order.
TRIGGER_FILTER_KEYS: tuple[str, ...] = ("branches", "tags", "paths", "types")

TRIGGERS_SUBGRAPH_ID = "triggers"
ALWAYS_CONDITION = "always()"

OUTPUT_FORMATS: tuple[str, ...] = ("mermaid", "markdown")
OUTPUT_FORMAT_DEFAULT = "mermaid"
