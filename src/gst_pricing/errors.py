"""Exception types raised by the pricing package."""


class GstPricingError(Exception):
    """Base error for configuration and opt-in strict lookups."""


class UnknownOrderTypeError(GstPricingError):
    """Raised when a caller requires a recognized order type label."""

    def __init__(self, label):
        self.label = label
        super().__init__(f"Unrecognized order type: {label!r}")
