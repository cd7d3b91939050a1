import math

import pytest

from reactive_pricer import (
    BlackSwaptionEngine,
    DiscountingSwapEngine,
    FlatForwardCurve,
    SimpleQuote,
    Swaption,
    VanillaSwap,
)
from reactive_pricer.sensitivity import implied_vol_vs_price, npv_vs_quote
from reactive_pricer.utils import DateUtils, thirty360_usa


@pytest.fixture
def book():
    rate = SimpleQuote(0.04)
    curve = FlatForwardCurve(rate)
    swap = VanillaSwap(
        VanillaSwap.PAYER,
        1_000_000.0,
        DateUtils.make_schedule("2026-09-10", "2031-09-10", "1Y"),
        0.04,
        thirty360_usa(),
        DateUtils.make_schedule("2026-09-10", "2031-09-10", "6M"),
    )
    swap.set_pricing_engine(DiscountingSwapEngine(curve))
    swaption = Swaption(swap, "2026-09-10")
    swaption.set_pricing_engine(BlackSwaptionEngine(curve, 0.2))
    return rate, curve, swap, swaption


def test_npv_vs_quote_sweeps_and_restores_the_quote(book):
    rate, _, swap, swaption = book
    base = swap.npv()

    df = npv_vs_quote({"swap": swap, "swaption": swaption}, rate, [0.03, 0.04, 0.05], x_col="rate")

    assert list(df.columns) == ["rate", "swap", "swaption"]
    assert len(df) == 3
    assert df["swap"].is_monotonic_increasing
    assert df["swaption"].is_monotonic_increasing
    assert rate.value() == 0.04
    assert swap.npv() == pytest.approx(base)


def test_implied_vol_vs_price_marks_unreachable_prices(book):
    _, curve, _, swaption = book
    base = swaption.npv()

    df = implied_vol_vs_price(swaption, curve, [base, 1.0e9])

    assert df["implied_vol"].iloc[0] == pytest.approx(0.2, abs=1e-6)
    assert math.isnan(df["implied_vol"].iloc[1])
