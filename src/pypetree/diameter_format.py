"""
Diameter display formatting.

Pipe sizes are shown the way they are written on drawings: whole inches
plus the nearest common eighth ("1-1/2\"", "3/4\""), falling back to a two
decimal value for sizes that are not on an eighth.
"""

import math

FRACTION_TOLERANCE = 0.05  # inches

# Common fractions for pipe sizes, checked in order
EIGHTHS: tuple[tuple[float, str], ...] = (
    (0.125, "1/8"),
    (0.25, "1/4"),
    (0.375, "3/8"),
    (0.5, "1/2"),
    (0.625, "5/8"),
    (0.75, "3/4"),
    (0.875, "7/8"),
)


def format_diameter_fraction(diameter: float) -> str:
    """
    Format a diameter in inches as a fractional size label.

    Examples:
        0.5   -> 1/2"
        1.0   -> 1"
        1.5   -> 1-1/2"
        2.125 -> 2-1/8"
        0.33  -> 3/8"
        0.06  -> 0.06"
    """
    if not math.isfinite(diameter):
        return f'{diameter:.2f}"'

    whole = int(diameter)
    fractional = diameter - whole

    # Very close to a whole number
    if abs(fractional) < FRACTION_TOLERANCE:
        return f'{whole}"'

    for value, label in EIGHTHS:
        if abs(fractional - value) < FRACTION_TOLERANCE:
            if whole > 0:
                return f'{whole}-{label}"'
            return f'{label}"'

    return f'{diameter:.2f}"'
