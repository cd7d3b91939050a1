import json
import math

import pandas as pd

from reactive_pricer import (
    AppConfig,
    DiscountingBondEngine,
    FixedRateBond,
    FlatForwardCurve,
)
from reactive_pricer.reporting import (
    results_table,
    save_config_snapshot,
    save_implied_parameters,
    save_results_table,
)
from reactive_pricer.utils import DateUtils


def test_results_table_keeps_failures_as_rows(tmp_path):
    priced = FixedRateBond(100.0, DateUtils.make_schedule("2025-09-10", "2030-09-10", "1Y"), 0.04)
    priced.set_pricing_engine(DiscountingBondEngine(FlatForwardCurve(0.04)))
    unpriced = FixedRateBond(100.0, DateUtils.make_schedule("2025-09-10", "2030-09-10", "1Y"), 0.04)

    df = results_table({"priced": priced, "unpriced": unpriced})

    assert list(df["instrument"]) == ["priced", "unpriced"]
    assert df.loc[0, "npv"] == priced.npv()
    assert df.loc[0, "clean_price"] == priced.clean_price()
    assert math.isnan(df.loc[1, "npv"])
    assert df.loc[1, "error"] == "null pricing engine"

    path = save_results_table(df, tmp_path / "out")
    assert pd.read_csv(path).shape[0] == 2


def test_json_outputs(tmp_path):
    cfg = AppConfig("2025-09-10")
    snapshot = json.loads(save_config_snapshot(cfg, tmp_path).read_text())
    assert snapshot["val_date"] == str(cfg.val_date)
    assert snapshot["observer_error_policy"] == "raise"
    assert snapshot["max_vol"] == 4.0

    params = json.loads(save_implied_parameters({"implied_vol": 0.21}, tmp_path).read_text())
    assert params == {"implied_vol": 0.21}
