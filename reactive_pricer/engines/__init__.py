"""Pricing engines.

Only the engine contract is imported here. Concrete engines live in their
own modules (``discounting_bond``, ``discounting_swap``, ``black_swaption``)
and depend on the argument records defined next to the instruments; import
them from there or from the top-level package.
"""

from .base import Arguments, GenericEngine, InstrumentResults, PricingEngine, Results
