import numpy as np
import QuantLib as ql
from scipy.stats import norm

from ..errors import ValidationError
from ..instruments.swaption import Settlement, SwaptionArguments
from ..quotes import Quote, SimpleQuote
from .base import GenericEngine, InstrumentResults


class BlackSwaptionEngine(GenericEngine):
    """Black-76 on the forward swap rate.

    Notes
    -----
    - Annuity and forward swap rate are computed on the discount curve over
      the swap periods paying after exercise.
    - Cash-settled swaptions use the cash annuity built from the forward
      swap rate itself (discounted from the first accrual start).
    - Volatility may be a float or a ``Quote``; a quote is observed so that
      changing it invalidates every swaption priced with this engine.

    Additional results: ``vega`` (per unit of volatility), ``annuity``,
    ``forward``, ``std_dev``.
    """

    arguments_class = SwaptionArguments
    results_class = InstrumentResults

    def __init__(self, discount_curve, volatility, day_count=None):
        super().__init__()
        self.discount_curve = discount_curve
        self.volatility = volatility if isinstance(volatility, Quote) else SimpleQuote(volatility)
        self.day_count = day_count or ql.Actual365Fixed()
        self.register_with(discount_curve)
        self.register_with(self.volatility)

    def _forward_and_annuity(self, args):
        curve = self.discount_curve
        exercise = args.exercise_date
        ref = curve.reference_date()

        fixed = [p for p in args.fixed_periods if exercise <= p.payment_date]
        floating = [p for p in args.floating_periods if exercise <= p.payment_date]
        if not fixed or not floating:
            raise ValidationError("no swap periods left after exercise")

        fixed_dfs = curve.discounts([p.payment_date for p in fixed])
        fixed_tau = np.array([p.accrual_period for p in fixed], dtype=float)
        annuity = float(np.dot(fixed_tau, fixed_dfs))

        starts = [p.start if ref < p.start else ref for p in floating]
        df_start = curve.discounts(starts)
        df_end = curve.discounts([p.end for p in floating])
        float_tau = np.array([p.accrual_period for p in floating], dtype=float)
        pay_dfs = curve.discounts([p.payment_date for p in floating])
        forwards = (df_start / df_end - 1.0) / float_tau
        float_pv = float(np.dot((forwards + args.spread) * float_tau, pay_dfs))

        forward = float_pv / annuity
        if args.settlement_type == Settlement.CASH:
            growth = np.cumprod(1.0 + forward * fixed_tau)
            start = fixed[0].start if ref < fixed[0].start else ref
            annuity = float(curve.discount(start) * np.sum(fixed_tau / growth))
        return forward, annuity

    def calculate(self):
        args = self._arguments
        res = self._results

        sigma = float(self.volatility.value())
        if sigma < 0.0:
            raise ValidationError(f"negative volatility ({sigma})")

        forward, annuity = self._forward_and_annuity(args)
        strike = args.fixed_rate
        if forward <= 0.0 or strike <= 0.0:
            raise ValidationError(
                f"Black formula needs positive forward ({forward}) and strike ({strike})"
            )

        ref = self.discount_curve.reference_date()
        t = max(float(self.day_count.yearFraction(ref, args.exercise_date)), 0.0)
        std_dev = sigma * np.sqrt(t)
        w = float(args.swap_type)

        if std_dev > 0.0:
            d1 = (np.log(forward / strike) + 0.5 * std_dev ** 2) / std_dev
            d2 = d1 - std_dev
            unit_price = w * (forward * norm.cdf(w * d1) - strike * norm.cdf(w * d2))
            unit_vega = forward * norm.pdf(d1) * np.sqrt(t)
        else:
            unit_price = max(w * (forward - strike), 0.0)
            unit_vega = 0.0

        scale = args.nominal * annuity
        res.value = float(scale * unit_price)
        res.error_estimate = None
        res.additional_results = {
            "vega": float(scale * unit_vega),
            "annuity": float(scale),
            "forward": float(forward),
            "std_dev": float(std_dev),
        }
