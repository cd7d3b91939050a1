import abc

from ..observable import Observable, Observer


class Arguments:
    """Inputs an instrument hands to its engine. Subclasses add fields."""

    def validate(self):
        pass


class Results:
    """Outputs an engine hands back. ``reset`` must clear every field."""

    def reset(self):
        pass


class InstrumentResults(Results):
    """Results every instrument understands.

    Fields an engine does not compute stay ``None`` (or absent from
    ``additional_results``) so readers can tell "not provided" from zero.
    """

    def __init__(self):
        self.value = None
        self.error_estimate = None
        self.additional_results = {}

    def reset(self):
        self.value = None
        self.error_estimate = None
        self.additional_results = {}


class PricingEngine(Observable, Observer, abc.ABC):
    """Abstract interface for pricing engines.

    An engine owns exactly one Arguments and one Results record. The
    instrument fills the former, calls ``calculate`` and reads the latter;
    ``reset`` is called before every run so nothing leaks from one run into
    the next. Engines observe the market data they read and re-broadcast
    its notifications to the instruments using them.

    ``arguments_class`` and ``results_class`` name the record types, which
    instruments check when the engine is attached.
    """

    arguments_class = Arguments
    results_class = Results

    def update(self):
        self.notify_observers()

    @abc.abstractmethod
    def get_arguments(self):
        raise NotImplementedError

    @abc.abstractmethod
    def get_results(self):
        raise NotImplementedError

    @abc.abstractmethod
    def reset(self):
        raise NotImplementedError

    @abc.abstractmethod
    def calculate(self):
        raise NotImplementedError


class GenericEngine(PricingEngine):
    """Engine storing one instance of its declared Arguments/Results classes."""

    def __init__(self):
        super().__init__()
        self._arguments = self.arguments_class()
        self._results = self.results_class()

    def get_arguments(self):
        return self._arguments

    def get_results(self):
        return self._results

    def reset(self):
        self._results.reset()
