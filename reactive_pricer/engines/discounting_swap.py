import numpy as np

from ..errors import ValidationError
from ..instruments.swap import SwapArguments, SwapResults
from .base import GenericEngine

BASIS_POINT = 1.0e-4


class DiscountingSwapEngine(GenericEngine):
    """Single-curve discounting of both swap legs.

    Floating coupons use the forward rate implied by the same curve over
    each accrual period (the part of a period before the curve's reference
    date is ignored). Only periods paying on or after the reference date
    are valued.
    """

    arguments_class = SwapArguments
    results_class = SwapResults

    def __init__(self, discount_curve):
        super().__init__()
        self.discount_curve = discount_curve
        if discount_curve is not None:
            self.register_with(discount_curve)

    def _annuity(self, periods):
        """Sum of accrual * DF(payment) over the periods still alive."""
        curve = self.discount_curve
        ref = curve.reference_date()
        live = [p for p in periods if not p.payment_date < ref]
        if not live:
            return 0.0, live, np.zeros(0)
        dfs = curve.discounts([p.payment_date for p in live])
        tau = np.array([p.accrual_period for p in live], dtype=float)
        return float(np.dot(tau, dfs)), live, dfs

    def calculate(self):
        if self.discount_curve is None:
            raise ValidationError("no discounting term structure set")
        args = self._arguments
        res = self._results
        curve = self.discount_curve
        ref = curve.reference_date()
        sign = float(args.swap_type)

        fixed_annuity, _, _ = self._annuity(args.fixed_periods)
        float_annuity, live, pay_dfs = self._annuity(args.floating_periods)

        float_pv = 0.0
        if live:
            starts = [p.start if ref < p.start else ref for p in live]
            df_start = curve.discounts(starts)
            df_end = curve.discounts([p.end for p in live])
            tau = np.array([p.accrual_period for p in live], dtype=float)
            forwards = (df_start / df_end - 1.0) / tau
            float_pv = float(np.dot((forwards + args.spread) * tau, pay_dfs))

        res.leg_npv = [
            -sign * args.nominal * args.fixed_rate * fixed_annuity,
            sign * args.nominal * float_pv,
        ]
        res.leg_bps = [
            -sign * args.nominal * fixed_annuity * BASIS_POINT,
            sign * args.nominal * float_annuity * BASIS_POINT,
        ]
        res.value = res.leg_npv[0] + res.leg_npv[1]
        res.error_estimate = None

        if res.leg_bps[0] != 0.0:
            res.fair_rate = args.fixed_rate - res.value / (res.leg_bps[0] / BASIS_POINT)
        if res.leg_bps[1] != 0.0:
            res.fair_spread = args.spread - res.value / (res.leg_bps[1] / BASIS_POINT)

        extra = {
            "fixed_leg_npv": res.leg_npv[0],
            "floating_leg_npv": res.leg_npv[1],
            "fixed_leg_bps": res.leg_bps[0],
            "floating_leg_bps": res.leg_bps[1],
        }
        if res.fair_rate is not None:
            extra["fair_rate"] = res.fair_rate
        if res.fair_spread is not None:
            extra["fair_spread"] = res.fair_spread
        res.additional_results = extra
