import math
from typing import Any


def to_number(value: Any) -> float:
    """
    Coerce raw form input to a finite float.
    None, blank strings, non-numeric text, NaN and infinities become 0.
    Accepts a comma as decimal separator ("1,5" -> 1.5).
    """
    if value is None or isinstance(value, bool):
        return 0.0

    if isinstance(value, str):
        text = value.strip().replace(" ", "")
        if not text:
            return 0.0
        if "," in text and "." not in text:
            text = text.replace(",", ".")
        try:
            number = float(text)
        except ValueError:
            return 0.0
    else:
        try:
            number = float(value)
        except (TypeError, ValueError):
            return 0.0

    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number
