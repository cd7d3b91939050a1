import os
from datetime import date

import QuantLib as ql

from reactive_pricer import (
    AppConfig,
    BlackSwaptionEngine,
    DiscountingBondEngine,
    DiscountingSwapEngine,
    FixedRateBond,
    MarketLoader,
    Swaption,
    VanillaSwap,
)
from reactive_pricer.utils import DateUtils, thirty360_usa


def test_smoke_run():
    """Basic smoke test: load data, build the book, price and imply.

    This is not a unit test of financial correctness; it checks that the code
    runs end-to-end without exploding.
    """
    val_date = ql.Date(10, 9, 2025)
    cfg = AppConfig(val_date)
    cfg.apply_global_settings()

    base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    data_dir = os.path.join(base_dir, 'data')

    loader = MarketLoader(cfg)
    curve = loader.load_curve(os.path.join(data_dir, 'discount_curve.csv'))
    quotes = loader.load_quotes(os.path.join(data_dir, 'vol_quotes.csv'))

    bond = FixedRateBond(
        face=100.0,
        schedule=DateUtils.make_schedule(date(2015, 12, 2), date(2035, 12, 2), ql.Semiannual),
        coupon_rate=0.035,
    )
    bond.set_pricing_engine(DiscountingBondEngine(curve))

    swap = VanillaSwap(
        VanillaSwap.PAYER,
        1_000_000.0,
        DateUtils.make_schedule(date(2026, 9, 10), date(2031, 9, 10), "1Y"),
        0.04,
        thirty360_usa(),
        DateUtils.make_schedule(date(2026, 9, 10), date(2031, 9, 10), "6M"),
    )
    swap.set_pricing_engine(DiscountingSwapEngine(curve))

    swaption = Swaption(swap, date(2026, 9, 10))
    swaption.set_pricing_engine(BlackSwaptionEngine(curve, quotes['swaption_vol_1y5y']))

    # Prices should be finite
    for inst in (bond, swap, swaption):
        assert abs(inst.npv()) < 1e7
    assert 0.0 < bond.clean_price() < 200.0
    assert 0.0 < swap.fair_rate() < 0.2

    vol = swaption.implied_volatility(swaption.npv(), curve, 0.3, **cfg.implied_vol_kwargs())
    assert abs(vol - 0.20) < 1e-4

    spread = bond.implied_spread(bond.npv() * 0.97, curve, **cfg.implied_spread_kwargs())
    assert spread > 0.0
