import pytest
import QuantLib as ql

from reactive_pricer import (
    BlackSwaptionEngine,
    ConvergenceError,
    DiscountingBondEngine,
    FixedRateBond,
    FlatForwardCurve,
    ImpliedParameterHelper,
    SimpleQuote,
    StateError,
    Swaption,
    UnsupportedOutputError,
    ValidationError,
    VanillaSwap,
)
from reactive_pricer.calibration import SENTINEL
from reactive_pricer.utils import DateUtils, set_evaluation_date, thirty360_usa


@pytest.fixture
def curve():
    return FlatForwardCurve(0.04)


@pytest.fixture
def swaption():
    swap = VanillaSwap(
        VanillaSwap.PAYER,
        1_000_000.0,
        DateUtils.make_schedule("2026-09-10", "2031-09-10", "1Y"),
        0.04,
        thirty360_usa(),
        DateUtils.make_schedule("2026-09-10", "2031-09-10", "6M"),
    )
    return Swaption(swap, "2026-09-10")


@pytest.fixture
def bond():
    return FixedRateBond(
        100.0,
        DateUtils.make_schedule("2024-06-15", "2034-06-15", ql.Semiannual),
        0.045,
    )


def make_helper(swaption, curve, tag="vega", target=10_000.0):
    vol = SimpleQuote(0.2)
    engine = BlackSwaptionEngine(curve, vol)
    return ImpliedParameterHelper(swaption, engine, vol, target, tag)


def test_helper_starts_from_the_sentinel(swaption, curve):
    helper = make_helper(swaption, curve)
    assert helper.parameter.value() == SENTINEL
    assert helper.engine_runs == 0


def test_value_and_derivative_at_one_point_price_once(swaption, curve):
    helper = make_helper(swaption, curve)

    v = helper.value(0.2)
    dv = helper.derivative(0.2)
    assert helper.engine_runs == 1
    assert dv > 0.0

    helper.value(0.25)
    assert helper.engine_runs == 2
    assert helper.value(0.25) != v


def test_missing_derivative_is_reported(swaption, curve):
    helper = make_helper(swaption, curve, tag="delta")
    with pytest.raises(UnsupportedOutputError, match="delta not provided"):
        helper.derivative(0.2)


def test_failed_repricing_forces_the_next_one_to_reprice(swaption, curve):
    helper = make_helper(swaption, curve)
    with pytest.raises(ValidationError):
        helper.value(-0.5)
    assert helper.parameter.value() == SENTINEL

    helper.value(0.2)
    assert helper.engine_runs == 1


def test_implied_volatility_reprices_the_target(swaption, curve):
    swaption.set_pricing_engine(BlackSwaptionEngine(curve, 0.25))
    target = swaption.npv()

    vol = swaption.implied_volatility(target, curve, 0.2)
    assert vol == pytest.approx(0.25, abs=1e-6)

    check = Swaption(swaption.underlying_swap(), "2026-09-10")
    check.set_pricing_engine(BlackSwaptionEngine(curve, vol))
    assert abs(check.npv() - target) <= 1e-4


def test_implied_volatility_leaves_the_attached_engine_alone(swaption, curve):
    engine = BlackSwaptionEngine(curve, 0.25)
    swaption.set_pricing_engine(engine)
    before = swaption.npv()

    swaption.implied_volatility(before * 1.2, curve, 0.2)

    assert swaption.pricing_engine() is engine
    assert swaption.is_calculated()
    assert swaption.npv() == before
    assert engine.volatility.value() == 0.25


def test_implied_volatility_without_an_engine(swaption, curve):
    assert swaption.pricing_engine() is None
    target = 20_000.0
    vol = swaption.implied_volatility(target, curve, 0.2)

    swaption.set_pricing_engine(BlackSwaptionEngine(curve, vol))
    assert swaption.npv() == pytest.approx(target, abs=1e-4)


def test_unreachable_price_does_not_converge(swaption, curve):
    # more than the underlying could ever be worth
    with pytest.raises(ConvergenceError):
        swaption.implied_volatility(1.0e9, curve, 0.2)


def test_expired_swaption_has_no_implied_volatility(swaption, curve):
    set_evaluation_date(ql.Date(1, 1, 2027))
    with pytest.raises(StateError, match="instrument expired"):
        swaption.implied_volatility(10_000.0, curve, 0.2)


def test_implied_spread_recovers_the_spread(bond, curve):
    bond.set_pricing_engine(DiscountingBondEngine(curve, SimpleQuote(0.01)))
    target = bond.npv()

    spread = bond.implied_spread(target, curve)
    assert spread == pytest.approx(0.01, abs=1e-9)


def test_implied_spread_of_the_curve_price_is_zero(bond, curve):
    bond.set_pricing_engine(DiscountingBondEngine(curve))
    assert bond.implied_spread(bond.npv(), curve, guess=0.02) == pytest.approx(0.0, abs=1e-9)


def test_expired_bond_has_no_implied_spread(bond, curve):
    set_evaluation_date(ql.Date(1, 1, 2035))
    with pytest.raises(StateError, match="instrument expired"):
        bond.implied_spread(100.0, curve)


def test_sentinel_value_is_priced_like_any_other(bond, curve):
    spread = SimpleQuote(0.0)
    helper = ImpliedParameterHelper(
        bond, DiscountingBondEngine(curve, spread), spread, 100.0, "spread_sensitivity"
    )
    assert helper.value(SENTINEL) > 0.0
    assert helper.engine_runs == 1


def test_implied_spread_with_a_bracket_starting_at_the_sentinel(bond, curve):
    bond.set_pricing_engine(DiscountingBondEngine(curve, SimpleQuote(0.015)))
    target = bond.npv()

    spread = bond.implied_spread(target, curve, min_spread=-1.0, max_spread=1.0)
    assert spread == pytest.approx(0.015, abs=1e-9)
