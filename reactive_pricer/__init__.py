"""Reactive instrument valuation.

This package provides:
- An Observable/Observer notification channel and lazily recalculated nodes
- Instruments that delegate valuation to swappable pricing engines
- Discounting bond/swap engines and a Black swaption engine
- A safeguarded Newton solver and the helper used to imply engine parameters
  (implied volatility, implied spread)

Dates, calendars, day counts and schedules come from QuantLib; the
evaluation date is QuantLib's global one.
"""

from .config import AppConfig
from .errors import (
    ConfigurationError,
    ConvergenceError,
    NotificationError,
    PricingError,
    RootNotBracketedError,
    StateError,
    UnsupportedOutputError,
    ValidationError,
)
from .observable import Observable, Observer
from .lazy import LazyObject
from .quotes import Quote, SimpleQuote
from .curves import FlatForwardCurve, InterpolatedDiscountCurve, YieldCurve
from .instrument import Instrument
from .instruments import FixedRateBond, Settlement, Swaption, VanillaSwap
from .engines.discounting_bond import DiscountingBondEngine
from .engines.discounting_swap import DiscountingSwapEngine
from .engines.black_swaption import BlackSwaptionEngine
from .solvers import Brent, NewtonSafe
from .calibration import ImpliedParameterHelper, solve_for_parameter
from .market import MarketLoader
