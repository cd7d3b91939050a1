"""Sensitivity sweeps through the dependency graph.

The sweeps move a market quote and read instrument values back; the
notification graph takes care of invalidating whatever depends on the quote,
so only the affected instruments are repriced.

The functions return ``pandas.DataFrame`` objects in a *wide* format: the
first column is the x-axis, and each additional column is an instrument
label.
"""

import pandas as pd

from .errors import ConvergenceError


def npv_vs_quote(instruments, quote, values, x_col="quote"):
    """NPV of each instrument for every value of ``quote``.

    Parameters
    ----------
    instruments : dict[str, Instrument]
        Label -> instrument, all depending (directly or not) on ``quote``.
    quote : SimpleQuote
        The quote to move. Its original value is restored afterwards.
    values : iterable[float]
    x_col : str
        Name of the x-axis column.
    """
    original = quote.value() if quote.is_valid() else None
    rows = []
    try:
        for v in values:
            quote.set_value(float(v))
            row = {x_col: float(v)}
            for label, instrument in instruments.items():
                row[label] = float(instrument.npv())
            rows.append(row)
    finally:
        quote.set_value(original)
    return pd.DataFrame(rows)


def implied_vol_vs_price(swaption, discount_curve, prices, guess=0.2, **solver_kwargs):
    """Implied Black volatility for a grid of swaption prices.

    Prices the solver cannot match give NaN rather than stopping the sweep.
    """
    rows = []
    for p in prices:
        try:
            vol = swaption.implied_volatility(float(p), discount_curve, guess, **solver_kwargs)
        except ConvergenceError:
            vol = float("nan")
        rows.append({"price": float(p), "implied_vol": vol})
    return pd.DataFrame(rows)
