import logging
import warnings

from . import observable
from .utils import DateUtils, set_evaluation_date


class AppConfig:
    """Central configuration object.

    All global knobs of the library live here so that a run can be
    reproduced from one object.

    Parameters
    ----------
    val_date : QuantLib.Date, datetime.date or str
        Evaluation date. Expiry checks and floating curve reference dates
        use it once ``apply_global_settings`` ran.
    observer_error_policy : str
        ``"raise"`` (default) or ``"log"``: what a broadcast does with the
        exceptions raised by its observers. Either way every observer is
        notified.
    log_level : str or int
        Level of the ``reactive_pricer`` logger.
    """

    def __init__(self, val_date, observer_error_policy="raise", log_level="WARNING"):
        self.val_date = DateUtils.to_ql_date(val_date)
        self.observer_error_policy = observer_error_policy
        self.log_level = log_level

        # ----------------
        # Implied volatility (NewtonSafe)
        # ----------------
        self.solver_accuracy = 1.0e-4
        self.solver_max_evaluations = 100
        self.min_vol = 1.0e-7
        self.max_vol = 4.0

        # ----------------
        # Implied spread (bonds)
        # ----------------
        self.spread_accuracy = 1.0e-8
        self.min_spread = -0.05
        self.max_spread = 1.0

        # ----------------
        # Global flags
        # ----------------
        self.suppress_warnings = True

    def apply_global_settings(self):
        """Apply evaluation date, observer policy, log level and warnings filter."""
        set_evaluation_date(self.val_date)
        observable.set_error_policy(self.observer_error_policy)
        logging.getLogger("reactive_pricer").setLevel(self.log_level)
        if self.suppress_warnings:
            warnings.filterwarnings("ignore", category=RuntimeWarning)

    def implied_vol_kwargs(self):
        """Solver settings in the form ``Swaption.implied_volatility`` takes."""
        return {
            "accuracy": self.solver_accuracy,
            "max_evaluations": self.solver_max_evaluations,
            "min_vol": self.min_vol,
            "max_vol": self.max_vol,
        }

    def implied_spread_kwargs(self):
        return {
            "accuracy": self.spread_accuracy,
            "max_evaluations": self.solver_max_evaluations,
            "min_spread": self.min_spread,
            "max_spread": self.max_spread,
        }
