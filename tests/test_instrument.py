import pytest

from reactive_pricer import (
    ConfigurationError,
    Instrument,
    Observer,
    StateError,
    ValidationError,
)
from reactive_pricer.engines.base import Arguments, GenericEngine, InstrumentResults, Results


class StubArguments(Arguments):
    def __init__(self):
        self.notional = None

    def validate(self):
        if self.notional is None or self.notional <= 0.0:
            raise ValidationError("notional must be positive")


class OtherArguments(Arguments):
    pass


class StubEngine(GenericEngine):
    """Returns ``npv * notional`` plus fixed additional results."""

    arguments_class = StubArguments
    results_class = InstrumentResults

    def __init__(self, npv=105.0, extra=None, error_estimate=None):
        super().__init__()
        self.npv = npv
        self.extra = {"vega": 0.42} if extra is None else extra
        self.error = error_estimate
        self.calls = 0

    def calculate(self):
        self.calls += 1
        self._results.value = self.npv * self._arguments.notional
        self._results.error_estimate = self.error
        self._results.additional_results = dict(self.extra)


class OtherEngine(GenericEngine):
    arguments_class = OtherArguments
    results_class = InstrumentResults

    def calculate(self):
        self._results.value = 1.0


class Stub(Instrument):
    arguments_class = StubArguments

    def __init__(self, notional=1.0, expired=False):
        super().__init__()
        self.notional = notional
        self.expired = expired

    def is_expired(self):
        return self.expired

    def setup_arguments(self, arguments):
        arguments.notional = self.notional


class Recorder(Observer):
    def __init__(self):
        super().__init__()
        self.calls = 0

    def update(self):
        self.calls += 1


def test_results_are_read_back_from_the_engine():
    inst = Stub()
    inst.set_pricing_engine(StubEngine())

    assert inst.npv() == 105.0
    assert inst.result("vega") == 0.42
    with pytest.raises(StateError, match="delta not provided"):
        inst.result("delta")


def test_error_estimate_not_provided_unless_engine_sets_it():
    inst = Stub()
    inst.set_pricing_engine(StubEngine())
    with pytest.raises(StateError, match="error estimate not provided"):
        inst.error_estimate()

    inst.set_pricing_engine(StubEngine(error_estimate=0.01))
    assert inst.error_estimate() == 0.01


def test_engine_notification_invalidates_and_one_recalculation_follows():
    engine = StubEngine()
    inst = Stub()
    inst.set_pricing_engine(engine)
    inst.npv()
    assert engine.calls == 1

    engine.update()
    assert not inst.is_calculated()

    inst.npv()
    inst.npv()
    inst.result("vega")
    assert engine.calls == 2


def test_replacing_the_engine_unsubscribes_from_the_old_one():
    old, new = StubEngine(npv=100.0), StubEngine(npv=200.0)
    inst = Stub()
    inst.set_pricing_engine(old)
    assert inst.npv() == 100.0

    inst.set_pricing_engine(new)
    assert inst.npv() == 200.0
    assert old.observer_count() == 0

    old.notify_observers()
    assert inst.is_calculated()
    assert new.calls == 1


def test_setting_an_engine_notifies_dependents():
    inst = Stub()
    rec = Recorder()
    inst.register_observer(rec)
    inst.set_pricing_engine(StubEngine())
    assert rec.calls == 1


def test_missing_engine_is_a_configuration_error():
    inst = Stub()
    with pytest.raises(ConfigurationError, match="null pricing engine"):
        inst.npv()
    assert not inst.is_calculated()


def test_mismatched_engine_is_refused_when_attached():
    inst = Stub()
    with pytest.raises(ConfigurationError, match="wrong argument type"):
        inst.set_pricing_engine(OtherEngine())
    assert inst.pricing_engine() is None


def test_wrong_result_type_is_refused():
    class PlainResultsEngine(StubEngine):
        results_class = Results

    inst = Stub()
    with pytest.raises(ConfigurationError, match="wrong result type"):
        inst.set_pricing_engine(PlainResultsEngine())


def test_validation_errors_propagate_and_leave_the_instrument_stale():
    engine = StubEngine()
    inst = Stub(notional=-1.0)
    inst.set_pricing_engine(engine)

    with pytest.raises(ValidationError, match="notional must be positive"):
        inst.npv()
    assert engine.calls == 0
    assert not inst.is_calculated()

    inst.notional = 2.0
    assert inst.npv() == 210.0


def test_expired_instrument_never_runs_its_engine():
    engine = StubEngine()
    inst = Stub(expired=True)
    inst.set_pricing_engine(engine)

    with pytest.raises(StateError, match="NPV not provided"):
        inst.npv()
    with pytest.raises(StateError):
        inst.result("vega")
    assert engine.calls == 0
    assert inst.is_calculated()


def test_expired_instrument_without_engine_is_a_state_error():
    with pytest.raises(StateError):
        Stub(expired=True).npv()


def test_expiry_clears_previously_cached_results():
    inst = Stub()
    inst.set_pricing_engine(StubEngine())
    assert inst.npv() == 105.0

    inst.expired = True
    with pytest.raises(StateError):
        inst.npv()
    assert inst.additional_results() == {}


def test_instruments_sharing_an_engine_keep_their_own_results():
    engine = StubEngine()
    a, b = Stub(notional=1.0), Stub(notional=2.0)
    a.set_pricing_engine(engine)
    b.set_pricing_engine(engine)
    assert b.npv() == 210.0

    # out-of-band engine change, then only A is recomputed
    engine.npv = 50.0
    engine.extra = {"vega": 9.9}
    a.recalculate()

    assert a.npv() == 50.0
    assert b.npv() == 210.0
    assert b.result("vega") == 0.42

    # B does depend on the engine: a notification reaches it too
    engine.notify_observers()
    assert b.npv() == 100.0


def test_additional_results_is_a_copy():
    inst = Stub()
    inst.set_pricing_engine(StubEngine())
    inst.additional_results()["vega"] = 0.0
    assert inst.result("vega") == 0.42
