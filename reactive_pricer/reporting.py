import json
from pathlib import Path

import pandas as pd

from .errors import PricingError


def ensure_dir(path):
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def results_table(instruments):
    """One row per instrument: NPV plus every additional result.

    Instruments that cannot be valued (expired, no engine, ...) keep a row
    with a NaN NPV and the error message.
    """
    rows = []
    for label, instrument in instruments.items():
        row = {"instrument": label}
        try:
            row["npv"] = instrument.npv()
            row.update(instrument.additional_results())
        except PricingError as exc:
            row["npv"] = float("nan")
            row["error"] = str(exc)
        rows.append(row)
    return pd.DataFrame(rows)


def save_results_table(results_df, output_dir):
    """Save the valuation summary as CSV."""
    out = ensure_dir(output_dir)
    csv_path = out / "results_summary.csv"
    results_df.to_csv(csv_path, index=False)
    return csv_path


def save_implied_parameters(params, output_dir):
    """Save implied volatilities / spreads as JSON for auditability."""
    out = ensure_dir(output_dir)
    path = out / "implied_parameters.json"
    with open(path, "w", encoding="utf-8") as f:
        json.dump(params, f, indent=2, sort_keys=True, default=float)
    return path


def save_config_snapshot(cfg, output_dir):
    """Persist the plain config fields as JSON (reproducibility)."""
    out = ensure_dir(output_dir)
    path = out / "config_snapshot.json"
    d = {}
    for k, v in cfg.__dict__.items():
        if k == "val_date":
            d[k] = str(v)
        elif isinstance(v, (int, float, str, bool)):
            d[k] = v
    with open(path, "w", encoding="utf-8") as f:
        json.dump(d, f, indent=2, sort_keys=True)
    return path


def save_dataframe(df, output_dir, filename):
    out = ensure_dir(output_dir)
    path = out / filename
    df.to_csv(path, index=False)
    return path
