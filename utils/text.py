import unicodedata

# ZERO WIDTH SPACE, ZERO WIDTH NON-JOINER, ZERO WIDTH JOINER, BYTE ORDER MARK
ZERO_WIDTH_CHARACTERS = ("\u200b", "\u200c", "\u200d", "\ufeff")

_ZERO_WIDTH_TABLE = {ord(char): None for char in ZERO_WIDTH_CHARACTERS}


def strip_zero_width(value: str) -> str:
    return value.translate(_ZERO_WIDTH_TABLE)


def sanitize_name(value: str | None) -> str | None:
    """Clean a display name before it is stored.

    Removes invisible zero-width characters, normalizes to composed (NFC)
    form and trims surrounding whitespace. Applying it twice gives the same
    result as applying it once.
    """
    if value is None:
        return None
    cleaned = strip_zero_width(value)
    cleaned = unicodedata.normalize("NFC", cleaned)
    return cleaned.strip()
