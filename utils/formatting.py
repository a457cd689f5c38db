# utils/formatting.py

def format_vnd(n: float) -> str:
    """
    Format an amount Vietnamese-style with '.' as thousands separator.
    Example: 1234567 -> "1.234.567", 1234.5 -> "1.234,5"
    """
    rounded = round(float(n), 3)
    text = f"{rounded:,.3f}".rstrip("0").rstrip(".")
    if text in ("-0", ""):
        text = "0"
    # swap separators: 1,234.5 -> 1.234,5
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


def format_number(n: float) -> str:
    """Plain number for dimensions and quantities: 2.0 -> "2", 1.25 -> "1.25"."""
    value = float(n)
    if value.is_integer():
        return str(int(value))
    return f"{value:.3f}".rstrip("0").rstrip(".")


def format_area(n: float) -> str:
    return f"{float(n):.2f}"
