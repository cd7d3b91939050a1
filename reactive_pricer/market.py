import pandas as pd
import QuantLib as ql

from .curves import InterpolatedDiscountCurve
from .quotes import SimpleQuote
from .utils import DateUtils, set_evaluation_date


class MarketLoader:
    """Load market inputs (discount curve, named quotes) from CSV files.

    The loader is intentionally permissive regarding column names to make it
    easy to run with different curve exports.
    """

    def __init__(self, cfg):
        self.cfg = cfg
        set_evaluation_date(cfg.val_date)

    def load_curve(self, path, day_count=None):
        """Load a discount curve from a CSV.

        The CSV is expected to contain at least:
        - a date column (e.g. 'date', 'data_vertice', 'pillar')
        - a discount factor column (e.g. 'discount', 'df', 'fator_desconto')

        Pillars on or before the valuation date are dropped and the
        valuation date is added with DF = 1.0. Extrapolation is enabled on
        the returned curve.
        """
        df = pd.read_csv(path)
        col_date = next(
            (c for c in df.columns
             if any(k in c.lower() for k in ("date", "data", "vertice", "pillar"))),
            None,
        )
        col_df = next(
            (c for c in df.columns
             if c != col_date
             and any(k in c.lower() for k in ("discount", "df", "fator", "desconto"))),
            None,
        )
        if col_date is None or col_df is None:
            raise ValueError(
                "curve CSV needs a date column (date/pillar) and a discount factor column (discount/df)."
            )

        df[col_date] = pd.to_datetime(df[col_date])
        df = df.sort_values(col_date)

        dates = [self.cfg.val_date]
        dfs = [1.0]
        for _, row in df.iterrows():
            d = DateUtils.to_ql_date(row[col_date])
            if d <= self.cfg.val_date:
                continue
            dates.append(d)
            dfs.append(float(row[col_df]))

        curve = InterpolatedDiscountCurve(dates, dfs, day_count or ql.Actual360())
        curve.enable_extrapolation()
        return curve

    def load_quotes(self, path):
        """Load ``name,value`` rows into a dict of SimpleQuotes.

        Rows with a missing value give invalid quotes.
        """
        df = pd.read_csv(path)
        if df.empty:
            return {}
        col_name, col_value = df.columns[0], df.columns[1]
        quotes = {}
        for _, row in df.iterrows():
            value = row[col_value]
            quotes[str(row[col_name]).strip()] = SimpleQuote(None if pd.isna(value) else float(value))
        return quotes
