from dataclasses import dataclass

import QuantLib as ql

from ..calibration import ImpliedParameterHelper, solve_for_parameter
from ..engines.base import Arguments, InstrumentResults
from ..errors import StateError, ValidationError
from ..instrument import Instrument
from ..quotes import SimpleQuote
from ..utils import DateUtils, evaluation_date, thirty360_usa


@dataclass
class Coupon:
    """One fixed coupon period."""

    accrual_start: object  # QuantLib Date
    accrual_end: object
    payment_date: object
    accrual_period: float
    rate: float
    amount: float


class BondArguments(Arguments):
    def __init__(self):
        self.face = None
        self.coupons = []
        self.redemption = None
        self.redemption_date = None
        self.day_count = None
        self.settlement_date = None

    def validate(self):
        if self.face is None or self.face <= 0.0:
            raise ValidationError("bond face amount must be positive")
        if self.redemption is None or self.redemption_date is None:
            raise ValidationError("bond redemption not set")
        if self.settlement_date is None:
            raise ValidationError("settlement date not set")
        if self.day_count is None:
            raise ValidationError("accrual day count not set")
        for c in self.coupons:
            if c.accrual_end < c.accrual_start:
                raise ValidationError(
                    f"coupon accrual ends ({c.accrual_end}) before it starts ({c.accrual_start})"
                )


class FixedRateBond(Instrument):
    """Fixed-rate bullet bond.

    Cash flows are built once from the QuantLib schedule:

        coupon_i = face * rate_i * yearFraction(start_i, end_i)

    paid on the payment-convention adjusted end date, plus the redemption
    on the (adjusted) maturity date. Settlement is the evaluation date
    advanced by ``settlement_days`` business days of the schedule calendar.

    Parameters
    ----------
    face : float
    schedule : QuantLib.Schedule
        Accrual schedule (see ``DateUtils.make_schedule``).
    coupon_rate : float or sequence of float
        Annual coupon rate in decimal, or one rate per period; periods
        beyond the end of the sequence use its last rate.
    day_count : QuantLib.DayCounter
        Accrual day count, 30/360 (USA) by default.
    payment_convention : int
        QuantLib business-day convention for payment dates.
    redemption : float or None
        Redemption amount; defaults to ``face``.
    settlement_days : int
        Business days between the evaluation date and settlement.
    """

    arguments_class = BondArguments
    results_class = InstrumentResults

    def __init__(self, face, schedule, coupon_rate, day_count=None,
                 payment_convention=ql.Following, redemption=None, issue_date=None,
                 settlement_days=0):
        super().__init__()
        self.face = float(face)
        if isinstance(coupon_rate, (int, float)):
            self.coupon_rates = [float(coupon_rate)]
        else:
            self.coupon_rates = [float(r) for r in coupon_rate]
        if not self.coupon_rates:
            raise ValidationError("no coupon rates given")
        self.settlement_days = int(settlement_days)
        self.day_count = day_count or thirty360_usa()
        self.redemption = float(face if redemption is None else redemption)

        dates = list(schedule)
        if len(dates) < 2:
            raise ValidationError("bond with no cashflows")
        # schedule.calendar() is a non-owning SWIG reference; keep the
        # schedule alive so the calendar does not dangle.
        self._schedule = schedule
        calendar = self.calendar = schedule.calendar()
        self.issue_date = DateUtils.to_ql_date(issue_date) if issue_date is not None else dates[0]
        self.maturity_date = dates[-1]
        self.redemption_date = calendar.adjust(self.maturity_date, payment_convention)

        self.coupons = []
        for i, (start, end) in enumerate(zip(dates[:-1], dates[1:])):
            tau = float(self.day_count.yearFraction(start, end))
            rate = self.coupon_rates[min(i, len(self.coupon_rates) - 1)]
            self.coupons.append(
                Coupon(
                    accrual_start=start,
                    accrual_end=end,
                    payment_date=calendar.adjust(end, payment_convention),
                    accrual_period=tau,
                    rate=rate,
                    amount=self.face * rate * tau,
                )
            )

    def cashflows(self):
        """All (payment date, amount) pairs, redemption included."""
        flows = [(c.payment_date, c.amount) for c in self.coupons]
        flows.append((self.redemption_date, self.redemption))
        return flows

    def settlement_date(self):
        return self.calendar.advance(evaluation_date(), self.settlement_days, ql.Days)

    def is_expired(self):
        return self.redemption_date < evaluation_date()

    def setup_arguments(self, arguments):
        arguments.face = self.face
        arguments.coupons = list(self.coupons)
        arguments.redemption = self.redemption
        arguments.redemption_date = self.redemption_date
        arguments.day_count = self.day_count
        arguments.settlement_date = self.settlement_date()

    # Convenience inspectors over the additional results
    def dirty_price(self):
        return self.result("dirty_price")

    def clean_price(self):
        return self.result("clean_price")

    def accrued_amount(self):
        return self.result("accrued_amount")

    def implied_spread(self, target_npv, discount_curve, guess=0.0, accuracy=1.0e-8,
                       max_evaluations=100, min_spread=-0.05, max_spread=1.0):
        """Zero spread over ``discount_curve`` that reprices the bond to ``target_npv``.

        The spread is continuously compounded and added to the curve's zero
        rates, in the spirit of a static OAS.
        """
        from ..engines.discounting_bond import DiscountingBondEngine

        if self.is_expired():
            raise StateError("instrument expired")
        spread = SimpleQuote(-1.0)
        engine = DiscountingBondEngine(discount_curve, spread)
        helper = ImpliedParameterHelper(self, engine, spread, target_npv, "spread_sensitivity")
        return solve_for_parameter(
            helper, guess, accuracy, max_evaluations, min_spread, max_spread
        )

