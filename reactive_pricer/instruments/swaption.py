from ..calibration import ImpliedParameterHelper, solve_for_parameter
from ..engines.base import InstrumentResults
from ..errors import StateError, ValidationError
from ..instrument import Instrument
from ..quotes import SimpleQuote
from ..utils import DateUtils, evaluation_date
from .swap import SwapArguments


class Settlement:
    PHYSICAL = "physical"
    CASH = "cash"


class SwaptionArguments(SwapArguments):
    def __init__(self):
        super().__init__()
        self.swap = None
        self.exercise_date = None
        self.settlement_type = Settlement.PHYSICAL

    def validate(self):
        super().validate()
        if self.swap is None:
            raise ValidationError("vanilla swap not set")
        if self.exercise_date is None:
            raise ValidationError("exercise not set")
        if self.settlement_type not in (Settlement.PHYSICAL, Settlement.CASH):
            raise ValidationError(f"unknown settlement type {self.settlement_type!r}")


class Swaption(Instrument):
    """European option to enter the underlying vanilla swap.

    The swaption observes its underlying swap, so anything that invalidates
    the swap also invalidates the swaption.
    """

    arguments_class = SwaptionArguments
    results_class = InstrumentResults

    def __init__(self, swap, exercise_date, settlement_type=Settlement.PHYSICAL):
        super().__init__()
        self.swap = swap
        self.exercise_date = DateUtils.to_ql_date(exercise_date)
        self.settlement_type = settlement_type
        self.register_with(swap)

    def is_expired(self):
        return self.exercise_date < evaluation_date()

    def swap_type(self):
        return self.swap.swap_type

    def underlying_swap(self):
        return self.swap

    def setup_arguments(self, arguments):
        self.swap.setup_arguments(arguments)
        arguments.swap = self.swap
        arguments.exercise_date = self.exercise_date
        arguments.settlement_type = self.settlement_type

    def implied_volatility(self, target_value, discount_curve, guess, accuracy=1.0e-4,
                           max_evaluations=100, min_vol=1.0e-7, max_vol=4.0):
        """Black volatility that reprices the swaption to ``target_value``.

        Runs a private Black engine on ``discount_curve``; the engine
        attached to the swaption, if any, is left alone.
        """
        from ..engines.black_swaption import BlackSwaptionEngine

        if self.is_expired():
            raise StateError("instrument expired")
        # implausible value, so that the first evaluation always reprices
        vol = SimpleQuote(-1.0)
        engine = BlackSwaptionEngine(discount_curve, vol)
        helper = ImpliedParameterHelper(self, engine, vol, target_value, "vega")
        return solve_for_parameter(helper, guess, accuracy, max_evaluations, min_vol, max_vol)
