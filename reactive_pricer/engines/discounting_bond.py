import numpy as np

from ..errors import ValidationError
from ..instruments.bond import BondArguments
from .base import GenericEngine, InstrumentResults

BASIS_POINT = 1.0e-4


class DiscountingBondEngine(GenericEngine):
    """Discount the bond's remaining cash flows on a yield curve.

    An optional spread quote (continuously compounded, added to the
    curve's zero rates) turns the engine into a static-spread pricer; its
    sensitivity is reported as ``spread_sensitivity`` so the spread can be
    implied by a Newton solver.

    Results
    -------
    value : float
        PV at the curve's reference date of every flow paid on or after
        settlement.
    additional_results : dict
        ``dirty_price`` / ``clean_price`` (per 100 face, at settlement),
        ``accrued_amount``, ``bps`` (PV of 1bp of coupon),
        ``spread_sensitivity`` (dPV/dspread).

    The error estimate is not provided.
    """

    arguments_class = BondArguments
    results_class = InstrumentResults

    def __init__(self, discount_curve, spread=None):
        super().__init__()
        self.discount_curve = discount_curve
        self.spread = spread
        self.register_with(discount_curve)
        if spread is not None:
            self.register_with(spread)

    def _spread(self):
        return 0.0 if self.spread is None else float(self.spread.value())

    def calculate(self):
        if self.discount_curve is None:
            raise ValidationError("no discounting term structure set")
        args = self._arguments
        res = self._results
        curve = self.discount_curve
        settle = args.settlement_date
        z = self._spread()

        live = [c for c in args.coupons if not c.payment_date < settle]
        dates = [c.payment_date for c in live]
        amounts = [c.amount for c in live]
        accruals = [c.accrual_period for c in live]
        if not args.redemption_date < settle:
            dates.append(args.redemption_date)
            amounts.append(args.redemption)
            accruals.append(0.0)

        if dates:
            t = np.array([curve.time_from_reference(d) for d in dates], dtype=float)
            dfs = curve.discounts(dates) * np.exp(-z * t)
            amounts = np.array(amounts, dtype=float)
            npv = float(np.dot(amounts, dfs))
            bps = float(np.dot(np.array(accruals, dtype=float), dfs)) * args.face * BASIS_POINT
            spread_sensitivity = float(-np.dot(t * amounts, dfs))
        else:
            npv = bps = spread_sensitivity = 0.0

        accrued = 0.0
        for c in args.coupons:
            if c.accrual_start <= settle < c.accrual_end:
                accrued = args.face * c.rate * float(
                    args.day_count.yearFraction(c.accrual_start, settle)
                )
                break

        t_settle = curve.time_from_reference(settle)
        df_settle = curve.discount(max(t_settle, 0.0)) * np.exp(-z * max(t_settle, 0.0))
        dirty = 100.0 * npv / (args.face * df_settle)
        accrued_price = 100.0 * accrued / args.face

        res.value = npv
        res.additional_results = {
            "dirty_price": dirty,
            "clean_price": dirty - accrued_price,
            "accrued_amount": accrued,
            "bps": bps,
            "spread_sensitivity": spread_sensitivity,
        }
