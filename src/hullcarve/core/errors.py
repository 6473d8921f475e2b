"""
Exceptions raised by hull construction.
"""


class InvalidInputError(ValueError):
    """
    Input rejected before any index is built.

    Raised for malformed point arrays (wrong shape, too few or non-finite
    points, all points collinear) and for out-of-range parameters.
    """
