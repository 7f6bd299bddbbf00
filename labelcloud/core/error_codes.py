"""
Structured error codes for layout runs.
Use these keys in return values and reports; map to user-facing messages in the CLI.
"""

# Known error keys
NO_LABELS = "no_labels"
INVALID_CANVAS = "invalid_canvas"
FORCED_PLACEMENT = "forced_placement"
LAYOUT_INVALID = "layout_invalid"

# User-facing messages (short, actionable)
USER_MESSAGES: dict[str, str] = {
    NO_LABELS: "No labels with text to lay out.",
    INVALID_CANVAS: "Canvas width and height must be positive.",
    FORCED_PLACEMENT: "Some labels did not fit and were forced into place; they may overlap. Try a larger canvas.",
    LAYOUT_INVALID: "Layout check found overlaps or labels outside the canvas.",
}


def user_message(error_key: str | None, fallback: str = "Something went wrong.") -> str:
    """Return a user-facing message for the given error key."""
    if not error_key:
        return fallback
    return USER_MESSAGES.get(error_key, fallback)


def layout_warnings(forced_count: int, report_ok: bool) -> list[str]:
    """Error keys describing a finished layout."""
    keys: list[str] = []
    if forced_count:
        keys.append(FORCED_PLACEMENT)
    if not report_ok:
        keys.append(LAYOUT_INVALID)
    return keys
