"""
Structured reason keys for labels that could not be placed.
Use these keys in PlacementResult.reason; map to user-facing messages in the UI.
"""

# Known reason keys (set by placement.place_with_details)
EMPTY_LABEL = "empty_label"
EMPTY_BAND = "empty_band"
DEGENERATE_BAND = "degenerate_band"
NO_FIT = "no_fit"

# User-facing messages (short, actionable)
USER_MESSAGES: dict[str, str] = {
    EMPTY_LABEL: "Label text is empty; nothing to draw.",
    EMPTY_BAND: "Band has no usable steps.",
    DEGENERATE_BAND: "Band has zero area; the label is hidden.",
    NO_FIT: "Label does not fit inside the band at any candidate point. Try a smaller font.",
}


def user_message(reason: str | None, fallback: str = "") -> str:
    """Return a user-facing message for the given reason key."""
    if not reason:
        return fallback
    return USER_MESSAGES.get(reason, fallback)
