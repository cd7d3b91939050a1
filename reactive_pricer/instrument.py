"""Instrument base class: lazy valuation delegated to a pricing engine."""

import abc
import logging

from .engines.base import Arguments, InstrumentResults
from .errors import ConfigurationError, StateError
from .lazy import LazyObject
from .utils import EVALUATION_DATE

logger = logging.getLogger(__name__)


class Instrument(LazyObject):
    """Abstract instrument.

    The value and any other result are only defined right after a
    successful calculation. Reading them triggers the calculation when the
    cached values are stale.

    Concrete instruments declare the record types they exchange with engines
    through ``arguments_class`` / ``results_class``; an engine whose records
    are not of those types is refused when attached.

    Notes
    -----
    - Expired instruments never run their engine: their value, error
      estimate and additional results are cleared, so reading them raises
      ``StateError``.
    - Every instrument observes the evaluation date, so moving it (with
      ``set_evaluation_date``) re-checks expiry and revalues on the next read.
    - Instruments that override ``perform_calculations`` may work without
      an engine; the default implementation requires one.
    """

    arguments_class = Arguments
    results_class = InstrumentResults

    def __init__(self):
        super().__init__()
        self._npv = None
        self._error_estimate = None
        self._additional_results = {}
        self._engine = None
        self.register_with(EVALUATION_DATE)

    # ------------------------------------------------------------------
    # Engine
    # ------------------------------------------------------------------
    def set_pricing_engine(self, engine):
        if engine is not None:
            self._check_engine(engine)
        if self._engine is not None:
            self.unregister_with(self._engine)
        self._engine = engine
        if self._engine is not None:
            self.register_with(self._engine)
        # cached values belong to the old engine
        self._calculated = False
        self.notify_observers()

    def pricing_engine(self):
        return self._engine

    def _check_engine(self, engine):
        if not isinstance(engine.get_arguments(), self.arguments_class):
            raise ConfigurationError(
                f"wrong argument type: {type(self).__name__} needs "
                f"{self.arguments_class.__name__}, engine provides "
                f"{type(engine.get_arguments()).__name__}"
            )
        if not isinstance(engine.get_results(), self.results_class):
            raise ConfigurationError(
                f"wrong result type: {type(self).__name__} needs "
                f"{self.results_class.__name__}, engine provides "
                f"{type(engine.get_results()).__name__}"
            )

    # ------------------------------------------------------------------
    # Lazy calculation
    # ------------------------------------------------------------------
    def calculate(self):
        if self.is_expired():
            self.setup_expired()
            self._calculated = True
        else:
            super().calculate()

    def perform_calculations(self):
        if self._engine is None:
            raise ConfigurationError("null pricing engine")
        engine = self._engine
        engine.reset()
        self.setup_arguments(engine.get_arguments())
        engine.get_arguments().validate()
        engine.calculate()
        self.fetch_results(engine.get_results())
        logger.debug("%s valued at %s", type(self).__name__, self._npv)

    @abc.abstractmethod
    def is_expired(self):
        """Return whether the instrument is still tradable."""
        raise NotImplementedError

    def setup_arguments(self, arguments):
        """Fill the engine's arguments. Mandatory when an engine is used."""
        raise NotImplementedError(
            f"{type(self).__name__} does not set up pricing-engine arguments"
        )

    def fetch_results(self, results):
        """Copy the engine's results into the instrument's cache."""
        if not isinstance(results, InstrumentResults):
            raise ConfigurationError("wrong result type: no results returned from pricing engine")
        self._npv = results.value
        self._error_estimate = results.error_estimate
        self._additional_results = dict(results.additional_results)

    def setup_expired(self):
        self._npv = None
        self._error_estimate = None
        self._additional_results = {}

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------
    def npv(self):
        """Net present value."""
        self.calculate()
        if self._npv is None:
            raise StateError("NPV not provided")
        return self._npv

    def error_estimate(self):
        """Error estimate on the NPV, when the engine provides one."""
        self.calculate()
        if self._error_estimate is None:
            raise StateError("error estimate not provided")
        return self._error_estimate

    def result(self, tag):
        """Any additional result returned by the pricing engine."""
        self.calculate()
        try:
            return self._additional_results[tag]
        except KeyError:
            raise StateError(f"{tag} not provided") from None

    def additional_results(self):
        self.calculate()
        return dict(self._additional_results)
