import logging

from .errors import UnsupportedOutputError
from .solvers import NewtonSafe

logger = logging.getLogger(__name__)

# Implausible value held by the parameter outside of a successful repricing.
SENTINEL = -1.0


class ImpliedParameterHelper:
    """Turn "which parameter value reprices the instrument?" into a 1-D root search.

    The helper drives a dedicated engine directly, bypassing the instrument's
    lazy cache: the engine's arguments are filled from the instrument once,
    then every evaluation writes the candidate value into ``parameter`` (a
    ``SimpleQuote`` the engine reads) and reruns the engine, unless the
    candidate equals the last one priced. A solver asking for value and
    derivative at the same point therefore prices only once.

    Parameters
    ----------
    instrument : Instrument
        Supplies the engine arguments; not modified.
    engine : PricingEngine
        Engine reading ``parameter``. Its results are reset before each run.
    parameter : SimpleQuote
        The free parameter (e.g. volatility, spread).
    target_value : float
        Engine value to match.
    derivative_tag : str
        Additional result holding d(value)/d(parameter), e.g. ``"vega"``.
    """

    def __init__(self, instrument, engine, parameter, target_value, derivative_tag):
        self.instrument = instrument
        self.engine = engine
        self.parameter = parameter
        self.target_value = float(target_value)
        self.derivative_tag = derivative_tag
        self.engine_runs = 0
        self._last_x = None

        self.parameter.set_value(SENTINEL)
        arguments = engine.get_arguments()
        instrument.setup_arguments(arguments)
        arguments.validate()
        self._results = engine.get_results()

    def _reprice(self, x):
        if self._last_x is not None and x == self._last_x:
            return
        self._last_x = None
        self.parameter.set_value(x)
        self.engine.reset()
        try:
            self.engine.calculate()
        except Exception:
            self.parameter.set_value(SENTINEL)
            raise
        self._last_x = x
        self.engine_runs += 1

    def value(self, x):
        self._reprice(x)
        if self._results.value is None:
            raise UnsupportedOutputError("value not provided")
        return self._results.value - self.target_value

    def derivative(self, x):
        self._reprice(x)
        try:
            return self._results.additional_results[self.derivative_tag]
        except KeyError:
            raise UnsupportedOutputError(f"{self.derivative_tag} not provided") from None


def solve_for_parameter(helper, guess, accuracy, max_evaluations, min_value, max_value,
                        solver=None):
    """Solve ``helper.value(x) == 0`` on ``[min_value, max_value]``.

    Uses a ``NewtonSafe`` solver unless another one is given.
    """
    solver = solver or NewtonSafe()
    solver.set_max_evaluations(max_evaluations)
    x = solver.solve(helper, accuracy, guess, min_value, max_value)
    logger.info(
        "%s parameter solved with %s as derivative: %.10g (%d evaluations, %d engine runs)",
        type(helper.instrument).__name__,
        helper.derivative_tag,
        x,
        solver.evaluation_count,
        helper.engine_runs,
    )
    return x
