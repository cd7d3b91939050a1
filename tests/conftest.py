import os
import sys

import pytest
import QuantLib as ql

# Allow running tests without installing the package.
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if BASE_DIR not in sys.path:
    sys.path.insert(0, BASE_DIR)

from reactive_pricer import observable  # noqa: E402
from reactive_pricer.utils import evaluation_date as current_date, set_evaluation_date  # noqa: E402

VAL_DATE = ql.Date(10, 9, 2025)


@pytest.fixture(autouse=True)
def evaluation_date():
    """Pin the global evaluation date and observer policy for every test."""
    saved = current_date()
    set_evaluation_date(VAL_DATE)
    observable.set_error_policy("raise")
    yield VAL_DATE
    observable.set_error_policy("raise")
    set_evaluation_date(saved)
