"""Utility functions for student names and house display."""

GREEN = "#1C3510"
RED = "#9B2323"
BLUE = "#1D1260"
YELLOW = "#E8B853"
DEFAULT_CARD_COLOR = "#3b4ca8"

HOUSE_COLORS = {
    1: GREEN, 8: GREEN,
    2: RED, 5: RED,
    3: BLUE, 6: BLUE,
    4: YELLOW, 7: YELLOW,
}


def _text(value):
    if value is None or (isinstance(value, float) and value != value):
        return ""
    return str(value)


def full_name(first_name, last_name):
    """Return ``"<first> <last>"`` treating missing parts as empty."""
    return f"{_text(first_name)} {_text(last_name)}".strip()


def house_color(house_id):
    """Card colour for a house, falling back to the default blue."""
    try:
        return HOUSE_COLORS.get(int(house_id), DEFAULT_CARD_COLOR)
    except (TypeError, ValueError):
        return DEFAULT_CARD_COLOR
