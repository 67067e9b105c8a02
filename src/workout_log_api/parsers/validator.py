"""Cheap check that pasted text looks like a Motra session export."""

SESSION_MARKERS = ("mi entrenamiento", "duración")
SET_MARKERS = ("repeticiones", "x ")


def looks_like_valid_session(text) -> bool:
    """Heuristic pre-filter run before the full parser. Never raises."""
    if not text or not isinstance(text, str):
        return False

    lower_text = text.lower()
    return (
        any(marker in lower_text for marker in SESSION_MARKERS)
        and any(marker in lower_text for marker in SET_MARKERS)
    )
