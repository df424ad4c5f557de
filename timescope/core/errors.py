"""Error types raised by the viewport core."""


class ConfigurationError(ValueError):
    """Invalid viewport configuration (scale limits, empty domain, bad widths).

    Raised immediately at initialization. Interactive input never raises this;
    malformed pointer or gesture data is dropped by the input coordinators.
    """
