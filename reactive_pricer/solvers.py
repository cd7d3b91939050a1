"""One-dimensional root finders.

Objectives are objects exposing ``value(x)`` and, for ``NewtonSafe``,
``derivative(x)``. Both solvers share the same call:

    solver.solve(f, accuracy, guess, x_min, x_max)

which returns ``x`` with ``|f.value(x)| <= accuracy`` inside the bracket.
"""

import logging
import math

from scipy import optimize

from .errors import ConvergenceError, RootNotBracketedError, ValidationError

logger = logging.getLogger(__name__)

MAX_FUNCTION_EVALUATIONS = 100


class Solver1D:
    """Bracket checks and evaluation bookkeeping shared by the solvers."""

    def __init__(self, max_evaluations=MAX_FUNCTION_EVALUATIONS):
        self.max_evaluations = int(max_evaluations)
        self.evaluation_count = 0

    def set_max_evaluations(self, n):
        if int(n) < 1:
            raise ValidationError(f"max evaluations must be positive, got {n}")
        self.max_evaluations = int(n)

    def solve(self, f, accuracy, guess, x_min, x_max):
        if accuracy <= 0.0:
            raise ValidationError(f"accuracy ({accuracy}) must be positive")
        if not x_min < x_max:
            raise ValidationError(f"invalid range: x_min ({x_min}) >= x_max ({x_max})")

        self.evaluation_count = 0
        f_min = self._value(f, x_min)
        if abs(f_min) <= accuracy:
            return x_min
        f_max = self._value(f, x_max)
        if abs(f_max) <= accuracy:
            return x_max
        if f_min * f_max > 0.0:
            raise RootNotBracketedError(
                f"root not bracketed: f[{x_min}, {x_max}] -> [{f_min}, {f_max}]"
            )
        if not x_min <= guess <= x_max:
            raise ValidationError(f"guess ({guess}) outside range [{x_min}, {x_max}]")
        return self._solve_impl(f, accuracy, guess, x_min, x_max, f_min, f_max)

    def _value(self, f, x):
        self.evaluation_count += 1
        y = float(f.value(x))
        if math.isnan(y):
            raise ConvergenceError(f"objective returned NaN at x={x}")
        return y

    def _not_converged(self, x):
        return ConvergenceError(
            f"did not converge: maximum number of function evaluations "
            f"({self.max_evaluations}) exceeded, last x={x}"
        )

    def _solve_impl(self, f, accuracy, guess, x_min, x_max, f_min, f_max):
        raise NotImplementedError


class NewtonSafe(Solver1D):
    """Newton-Raphson kept inside the bracket by bisection.

    A Newton step is taken whenever it lands inside the current bracket and
    shrinks fast enough; otherwise the bracket is halved. The bracket is
    narrowed with the sign of f at every new point, so it always contains
    the root.
    """

    def _solve_impl(self, f, accuracy, guess, x_min, x_max, f_min, f_max):
        # orient the search so that f(x_lo) < 0
        if f_min < 0.0:
            x_lo, x_hi = x_min, x_max
        else:
            x_lo, x_hi = x_max, x_min

        dx_old = x_max - x_min
        dx = dx_old

        root = guess
        f_root = self._value(f, root)
        df_root = float(f.derivative(root))

        while True:
            if abs(f_root) <= accuracy:
                logger.debug(
                    "NewtonSafe converged to %s after %d evaluations",
                    root, self.evaluation_count,
                )
                return root
            if self.evaluation_count >= self.max_evaluations:
                raise self._not_converged(root)

            out_of_range = (
                ((root - x_hi) * df_root - f_root) * ((root - x_lo) * df_root - f_root) > 0.0
            )
            too_slow = abs(2.0 * f_root) > abs(dx_old * df_root)
            if df_root == 0.0 or out_of_range or too_slow:
                dx_old = dx
                dx = 0.5 * (x_hi - x_lo)
                root = x_lo + dx
                step = "bisection"
            else:
                dx_old = dx
                dx = f_root / df_root
                root -= dx
                step = "newton"

            f_root = self._value(f, root)
            df_root = float(f.derivative(root))
            logger.debug("NewtonSafe %s step: x=%s f=%s", step, root, f_root)

            if f_root < 0.0:
                x_lo = root
            else:
                x_hi = root


class Brent(Solver1D):
    """Derivative-free alternative, delegating to ``scipy.optimize.brentq``."""

    def _solve_impl(self, f, accuracy, guess, x_min, x_max, f_min, f_max):
        # brentq evaluates both ends again, then once per iteration; one more
        # evaluation checks the residual, since brentq stops on the bracket width
        iterations = self.max_evaluations - self.evaluation_count - 3
        if iterations < 1:
            raise self._not_converged(x_min)
        root, _ = optimize.brentq(
            lambda x: self._value(f, x),
            x_min,
            x_max,
            xtol=1e-15,
            maxiter=iterations,
            full_output=True,
            disp=False,
        )
        if abs(self._value(f, root)) > accuracy:
            raise self._not_converged(root)
        logger.debug("Brent converged to %s after %d evaluations", root, self.evaluation_count)
        return root
