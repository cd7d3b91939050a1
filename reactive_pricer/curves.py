"""Discount curves used by the engines.

Curves are observable market data: engines register with them and hear about
every change. A curve built on a ``Quote`` forwards that quote's
notifications, so bumping the quote invalidates every instrument priced off
the curve.

The discounting itself is done by a QuantLib term structure the curve builds
on first use and rebuilds after any change. Times are year fractions from
the curve's reference date, measured with the curve's QuantLib day counter.
Curves without an explicit reference date float on the global evaluation
date and observe it.

Like QuantLib curves, they refuse to discount past their last date unless
extrapolation was enabled.
"""

import abc

import numpy as np
import QuantLib as ql

from .errors import ValidationError
from .observable import Observable, Observer
from .quotes import Quote
from .utils import EVALUATION_DATE, DateUtils, evaluation_date


class YieldCurve(Observable, Observer):
    """Base class: subclasses build the QuantLib term structure in ``_build()``."""

    def __init__(self, day_count=None, reference_date=None):
        super().__init__()
        self.day_count = day_count or ql.Actual365Fixed()
        self._reference_date = (
            None if reference_date is None else DateUtils.to_ql_date(reference_date)
        )
        self._extrapolate = False
        self._ts = None
        self._ts_reference = None
        if self._reference_date is None:
            self.register_with(EVALUATION_DATE)

    def update(self):
        self._ts = None
        self.notify_observers()

    def reference_date(self):
        if self._reference_date is not None:
            return self._reference_date
        return evaluation_date()

    # Extrapolation
    def enable_extrapolation(self, b=True):
        self._extrapolate = bool(b)
        if self._ts is not None:
            self._apply_extrapolation(self._ts)

    def disable_extrapolation(self):
        self.enable_extrapolation(False)

    def allows_extrapolation(self):
        return self._extrapolate

    def _apply_extrapolation(self, ts):
        if self._extrapolate:
            ts.enableExtrapolation()
        else:
            ts.disableExtrapolation()

    def term_structure(self):
        """The QuantLib term structure behind the curve, rebuilt when stale."""
        ref = self.reference_date()
        if self._ts is None or self._ts_reference != ref:
            self._ts = self._build(ref)
            self._ts_reference = ref
            self._apply_extrapolation(self._ts)
        return self._ts

    def max_time(self):
        return float(self.term_structure().maxTime())

    def time_from_reference(self, d):
        return float(self.day_count.yearFraction(self.reference_date(), DateUtils.to_ql_date(d)))

    def _check_time(self, t):
        if t < 0.0:
            raise ValidationError(f"negative time ({t}) given to discount curve")
        if not self._extrapolate and t > self.max_time():
            raise ValidationError(
                f"time ({t}) is past the curve's max time ({self.max_time()}) "
                f"and extrapolation is disabled"
            )

    def discount(self, d_or_t):
        """Discount factor to a date or to a time (year fraction)."""
        if isinstance(d_or_t, (int, float)):
            t = float(d_or_t)
        else:
            t = self.time_from_reference(d_or_t)
        self._check_time(t)
        return float(self.term_structure().discount(t))

    def discounts(self, dates):
        """``discount`` over a sequence of dates, as a numpy array."""
        ts = self.term_structure()
        times = [self.time_from_reference(d) for d in dates]
        for t in times:
            self._check_time(t)
        return np.array([ts.discount(t) for t in times], dtype=float)

    def zero_rate(self, t):
        """Continuously compounded zero rate to time ``t``."""
        t = float(t)
        if t <= 0.0:
            t = 1.0e-4
        self._check_time(t)
        return float(self.term_structure().zeroRate(t, ql.Continuous).rate())

    @abc.abstractmethod
    def _build(self, reference_date):
        raise NotImplementedError


class FlatForwardCurve(YieldCurve):
    """Flat continuously compounded curve (``ql.FlatForward``) on a rate or a quote."""

    def __init__(self, rate, day_count=None, reference_date=None):
        super().__init__(day_count, reference_date)
        self._rate = rate
        if isinstance(rate, Quote):
            self.register_with(rate)

    def rate(self):
        if isinstance(self._rate, Quote):
            return self._rate.value()
        return float(self._rate)

    def _build(self, reference_date):
        return ql.FlatForward(reference_date, self.rate(), self.day_count, ql.Continuous)


class InterpolatedDiscountCurve(YieldCurve):
    """Discount factors on pillar dates (``ql.DiscountCurve``, log-linear).

    The first pillar is the reference date and must carry a discount factor
    of 1.0. Past the last pillar, when extrapolation is enabled, QuantLib
    holds the last instantaneous forward rate flat.
    """

    def __init__(self, dates, discounts, day_count=None):
        dates = [DateUtils.to_ql_date(d) for d in dates]
        if len(dates) != len(discounts):
            raise ValidationError("dates and discount factors differ in size")
        if len(dates) < 2:
            raise ValidationError("at least two pillars are needed")
        super().__init__(day_count, reference_date=dates[0])
        discounts = [float(x) for x in discounts]
        if abs(discounts[0] - 1.0) > 1e-12:
            raise ValidationError("first discount factor must be 1.0")
        if any(x <= 0.0 for x in discounts):
            raise ValidationError("discount factors must be positive")
        if any(not a < b for a, b in zip(dates[:-1], dates[1:])):
            raise ValidationError("pillar dates must be strictly increasing")

        self.dates = dates
        self.discount_factors = discounts

    def _build(self, reference_date):
        return ql.DiscountCurve(self.dates, self.discount_factors, self.day_count)
