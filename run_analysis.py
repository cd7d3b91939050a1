from datetime import date
from pathlib import Path

import QuantLib as ql

from reactive_pricer import (
    AppConfig,
    BlackSwaptionEngine,
    DiscountingBondEngine,
    DiscountingSwapEngine,
    FixedRateBond,
    FlatForwardCurve,
    MarketLoader,
    SimpleQuote,
    Swaption,
    VanillaSwap,
)
from reactive_pricer.reporting import (
    results_table,
    save_config_snapshot,
    save_dataframe,
    save_implied_parameters,
    save_results_table,
)
from reactive_pricer.sensitivity import implied_vol_vs_price, npv_vs_quote
from reactive_pricer.utils import DateUtils, thirty360_usa


def main():
    # -------------------------------------------------------------------------
    # 0. Inputs
    # -------------------------------------------------------------------------
    val_date = ql.Date(10, 9, 2025)
    cfg = AppConfig(val_date, log_level="INFO")
    cfg.apply_global_settings()

    project_root = Path(__file__).resolve().parent
    data_dir = project_root / "data"
    out_dir = project_root / "outputs"
    out_dir.mkdir(parents=True, exist_ok=True)

    # -------------------------------------------------------------------------
    # 1. Market data
    # -------------------------------------------------------------------------
    print("--- 1. Market data ---")
    loader = MarketLoader(cfg)
    curve = loader.load_curve(str(data_dir / "discount_curve.csv"))
    quotes = loader.load_quotes(str(data_dir / "vol_quotes.csv"))
    vol = quotes["swaption_vol_1y5y"]

    flat_rate = SimpleQuote(0.04)
    flat_curve = FlatForwardCurve(flat_rate)
    print(f"DF(5Y) on loaded curve: {curve.discount(5.0):.6f}")

    # -------------------------------------------------------------------------
    # 2. Instruments + engines
    # -------------------------------------------------------------------------
    bond = FixedRateBond(
        face=100.0,
        schedule=DateUtils.make_schedule(date(2015, 12, 2), date(2035, 12, 2), ql.Semiannual),
        coupon_rate=0.035,
        day_count=thirty360_usa(),
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
    swap.set_pricing_engine(DiscountingSwapEngine(flat_curve))

    swaption = Swaption(swap, date(2026, 9, 10))
    swaption.set_pricing_engine(BlackSwaptionEngine(flat_curve, vol))

    # -------------------------------------------------------------------------
    # 3. Values
    # -------------------------------------------------------------------------
    print("\n--- 3. Values ---")
    print(f"{'INSTRUMENT':<12} | {'NPV':<14} | EXTRA")
    print("-" * 60)
    print(f"{'Bond':<12} | {bond.npv():<14.4f} | clean={bond.clean_price():.4f}")
    print(f"{'Swap':<12} | {swap.npv():<14.4f} | fair rate={swap.fair_rate():.6f}")
    print(f"{'Swaption':<12} | {swaption.npv():<14.4f} | vega={swaption.result('vega'):.4f}")

    summary = results_table({"bond": bond, "swap": swap, "swaption": swaption})
    save_results_table(summary, out_dir)

    # -------------------------------------------------------------------------
    # 4. Implied parameters
    # -------------------------------------------------------------------------
    print("\n--- 4. Implied parameters ---")
    target = swaption.npv() * 1.10
    implied = swaption.implied_volatility(target, flat_curve, 0.2, **cfg.implied_vol_kwargs())
    print(f"Implied vol for {target:.4f}: {implied:.6f} (quoted {vol.value():.4f})")

    spread = bond.implied_spread(bond.npv() * 0.97, curve, **cfg.implied_spread_kwargs())
    print(f"Implied spread for a 3% cheaper bond: {spread * 1e4:.2f} bps")

    save_implied_parameters(
        {"swaption_target": target, "implied_vol": implied, "bond_spread": spread},
        out_dir,
    )
    save_config_snapshot(cfg, out_dir)

    # -------------------------------------------------------------------------
    # 5. Sweeps
    # -------------------------------------------------------------------------
    df_rate = npv_vs_quote(
        {"swap": swap, "swaption": swaption},
        flat_rate,
        [0.02, 0.03, 0.04, 0.05, 0.06],
        x_col="flat_rate",
    )
    save_dataframe(df_rate, out_dir, "npv_vs_flat_rate.csv")

    df_vol = npv_vs_quote({"swaption": swaption}, vol, [0.1, 0.15, 0.2, 0.3, 0.4], x_col="vol")
    save_dataframe(df_vol, out_dir, "npv_vs_vol.csv")

    base = swaption.npv()
    df_iv = implied_vol_vs_price(swaption, flat_curve, [base * m for m in (0.5, 0.8, 1.0, 1.5)])
    save_dataframe(df_iv, out_dir, "implied_vol_vs_price.csv")

    print(df_rate.to_string(index=False))
    print(f"\nOutputs written to: {out_dir}")


if __name__ == "__main__":
    main()
