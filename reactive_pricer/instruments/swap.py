from dataclasses import dataclass

import QuantLib as ql

from ..engines.base import Arguments, InstrumentResults
from ..errors import ConfigurationError, StateError, ValidationError
from ..instrument import Instrument
from ..utils import evaluation_date


@dataclass
class AccrualPeriod:
    start: object  # QuantLib Date
    end: object
    payment_date: object
    accrual_period: float


def _periods(schedule, day_count, payment_convention):
    dates = list(schedule)
    calendar = schedule.calendar()
    return [
        AccrualPeriod(
            start=s,
            end=e,
            payment_date=calendar.adjust(e, payment_convention),
            accrual_period=float(day_count.yearFraction(s, e)),
        )
        for s, e in zip(dates[:-1], dates[1:])
    ]


class SwapArguments(Arguments):
    def __init__(self):
        self.swap_type = None
        self.nominal = None
        self.fixed_rate = None
        self.spread = 0.0
        self.fixed_periods = []
        self.floating_periods = []

    def validate(self):
        if self.swap_type not in (VanillaSwap.PAYER, VanillaSwap.RECEIVER):
            raise ValidationError(f"unknown swap type {self.swap_type!r}")
        if self.nominal is None:
            raise ValidationError("nominal not set")
        if self.fixed_rate is None:
            raise ValidationError("fixed rate not set")
        if not self.fixed_periods:
            raise ValidationError("no fixed-leg periods given")
        if not self.floating_periods:
            raise ValidationError("no floating-leg periods given")


class SwapResults(InstrumentResults):
    def __init__(self):
        super().__init__()
        self.leg_npv = [None, None]
        self.leg_bps = [None, None]
        self.fair_rate = None
        self.fair_spread = None

    def reset(self):
        super().reset()
        self.leg_npv = [None, None]
        self.leg_bps = [None, None]
        self.fair_rate = None
        self.fair_spread = None


class VanillaSwap(Instrument):
    """Fixed-vs-floating interest rate swap on a single curve.

    Leg 0 is the fixed leg, leg 1 the floating leg. A payer swap pays fixed
    and receives floating; a receiver swap does the opposite. Floating
    coupons are projected off the discount curve (forward rate plus
    ``spread``).
    """

    PAYER = 1
    RECEIVER = -1

    arguments_class = SwapArguments
    results_class = SwapResults

    def __init__(self, swap_type, nominal, fixed_schedule, fixed_rate, fixed_day_count,
                 float_schedule, spread=0.0, float_day_count=None,
                 payment_convention=ql.ModifiedFollowing):
        super().__init__()
        if swap_type not in (self.PAYER, self.RECEIVER):
            raise ValidationError(f"unknown swap type {swap_type!r}")
        self.swap_type = swap_type
        self.nominal = float(nominal)
        self.fixed_rate = float(fixed_rate)
        self.spread = float(spread)
        self.fixed_day_count = fixed_day_count
        self.float_day_count = float_day_count or ql.Actual360()
        self.fixed_periods = _periods(fixed_schedule, fixed_day_count, payment_convention)
        self.floating_periods = _periods(float_schedule, self.float_day_count, payment_convention)
        if not self.fixed_periods or not self.floating_periods:
            raise ValidationError("swap legs need at least one period")
        self._leg_npv = [None, None]
        self._leg_bps = [None, None]
        self._fair_rate = None
        self._fair_spread = None

    def start_date(self):
        return min(self.fixed_periods[0].start, self.floating_periods[0].start)

    def maturity_date(self):
        return max(self.fixed_periods[-1].payment_date, self.floating_periods[-1].payment_date)

    def is_expired(self):
        return self.maturity_date() < evaluation_date()

    def setup_arguments(self, arguments):
        arguments.swap_type = self.swap_type
        arguments.nominal = self.nominal
        arguments.fixed_rate = self.fixed_rate
        arguments.spread = self.spread
        arguments.fixed_periods = list(self.fixed_periods)
        arguments.floating_periods = list(self.floating_periods)

    def fetch_results(self, results):
        if not isinstance(results, SwapResults):
            raise ConfigurationError("wrong result type: swap results expected")
        super().fetch_results(results)
        self._leg_npv = list(results.leg_npv)
        self._leg_bps = list(results.leg_bps)
        self._fair_rate = results.fair_rate
        self._fair_spread = results.fair_spread

    def setup_expired(self):
        super().setup_expired()
        self._leg_npv = [None, None]
        self._leg_bps = [None, None]
        self._fair_rate = self._fair_spread = None

    def _provided(self, value, name):
        if value is None:
            raise StateError(f"{name} not provided")
        return value

    def fixed_leg_npv(self):
        self.calculate()
        return self._provided(self._leg_npv[0], "fixed-leg NPV")

    def floating_leg_npv(self):
        self.calculate()
        return self._provided(self._leg_npv[1], "floating-leg NPV")

    def fixed_leg_bps(self):
        self.calculate()
        return self._provided(self._leg_bps[0], "fixed-leg BPS")

    def floating_leg_bps(self):
        self.calculate()
        return self._provided(self._leg_bps[1], "floating-leg BPS")

    def fair_rate(self):
        self.calculate()
        return self._provided(self._fair_rate, "fair rate")

    def fair_spread(self):
        self.calculate()
        return self._provided(self._fair_spread, "fair spread")
