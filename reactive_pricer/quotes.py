"""Market quotes: the leaves of the dependency graph."""

import abc
import math

from .errors import StateError
from .observable import Observable


class Quote(Observable, abc.ABC):
    """A single observable market value."""

    @abc.abstractmethod
    def value(self):
        raise NotImplementedError

    @abc.abstractmethod
    def is_valid(self):
        raise NotImplementedError


class SimpleQuote(Quote):
    """Settable quote; observers hear about it only when the value changes."""

    def __init__(self, value=None):
        super().__init__()
        self._value = None if value is None else float(value)

    def value(self):
        if self._value is None:
            raise StateError("invalid quote")
        return self._value

    def is_valid(self):
        return self._value is not None

    def set_value(self, value):
        """Set a new value and return the change (0.0 if nothing changed)."""
        new = None if value is None else float(value)
        if new == self._value:
            return 0.0
        old = self._value
        self._value = new
        self.notify_observers()
        if old is None or new is None:
            return math.nan
        return new - old

    def reset(self):
        self.set_value(None)

    def __repr__(self):
        return f"SimpleQuote({self._value!r})"
