import QuantLib as ql
import pandas as pd

from .observable import Observable


class EvaluationDate(Observable):
    """Observable view of QuantLib's global evaluation date.

    Curves floating on the evaluation date and every instrument register
    with ``EVALUATION_DATE``; moving the date through ``set_value`` (or
    ``set_evaluation_date``) invalidates them. Assigning
    ``ql.Settings.instance().evaluationDate`` directly notifies nobody.
    """

    def __init__(self):
        super().__init__()
        self._last = None

    def value(self):
        return ql.Settings.instance().evaluationDate

    def set_value(self, d):
        d = DateUtils.to_ql_date(d)
        changed = self._last is None or d != self._last or d != self.value()
        ql.Settings.instance().evaluationDate = d
        self._last = d
        if changed:
            self.notify_observers()


EVALUATION_DATE = EvaluationDate()


def evaluation_date():
    """Current evaluation date (QuantLib's global settings)."""
    return EVALUATION_DATE.value()


def set_evaluation_date(d):
    EVALUATION_DATE.set_value(d)


def us_calendar():
    """Return a generic United States calendar.

    Different QuantLib builds expose different market enums, so we try the
    broadest one first.
    """
    for market in ("Settlement", "GovernmentBond"):
        if hasattr(ql.UnitedStates, market):
            return ql.UnitedStates(getattr(ql.UnitedStates, market))
    return ql.TARGET()


def thirty360_usa():
    """30/360 (USA) day count, falling back to Actual/360 on old builds."""
    if hasattr(ql.Thirty360, "USA"):
        return ql.Thirty360(ql.Thirty360.USA)
    return ql.Actual360()


class DateUtils:
    @staticmethod
    def to_ql_date(d):
        """Convert datetime.date, pandas timestamps and ISO strings to QuantLib.Date."""
        if isinstance(d, ql.Date):
            return d
        if isinstance(d, str):
            d = pd.to_datetime(d).date()
        elif isinstance(d, pd.Timestamp):
            d = d.date()
        return ql.Date(d.day, d.month, d.year)

    @staticmethod
    def to_period(tenor):
        """QuantLib.Period from a period, a string such as '6M' or a frequency."""
        if isinstance(tenor, ql.Period):
            return tenor
        if isinstance(tenor, str):
            return ql.Period(tenor.strip().upper())
        # QuantLib Frequency is an int enum (e.g. ql.Semiannual)
        return ql.Period(tenor)

    @staticmethod
    def make_schedule(start, end, tenor, calendar=None, convention=ql.Unadjusted,
                      rule=ql.DateGeneration.Backward, end_of_month=False):
        """Build a QuantLib schedule from loosely typed inputs."""
        calendar = calendar or us_calendar()
        return ql.Schedule(
            DateUtils.to_ql_date(start),
            DateUtils.to_ql_date(end),
            DateUtils.to_period(tenor),
            calendar,
            convention,
            convention,
            rule,
            bool(end_of_month),
        )
