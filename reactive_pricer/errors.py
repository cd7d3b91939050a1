"""Exception hierarchy shared by the whole package.

Every error raised on purpose by the library derives from ``PricingError`` so
callers can catch the library's failures in one place while still being able
to tell them apart.
"""


class PricingError(Exception):
    """Base class for all library errors."""


class ConfigurationError(PricingError):
    """Missing pricing engine, or engine/instrument records of the wrong kind."""


class ValidationError(PricingError):
    """Arguments (or solver inputs) rejected before any computation ran."""


class StateError(PricingError):
    """A value was read that the last calculation did not provide."""


class ConvergenceError(PricingError):
    """A root-finder gave up."""


class RootNotBracketedError(ConvergenceError):
    """The objective has the same sign at both ends of the bracket."""


class UnsupportedOutputError(PricingError):
    """An auxiliary output was requested that the engine does not compute."""


class NotificationError(PricingError):
    """One or more observers failed while being notified.

    Raised only after every registered observer received the notification.
    ``errors`` holds the original exceptions.
    """

    def __init__(self, errors):
        self.errors = list(errors)
        first = self.errors[0] if self.errors else None
        super().__init__(
            f"could not notify {len(self.errors)} observer(s): {first!r}"
        )
