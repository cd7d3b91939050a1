"""Observable / Observer notification channel.

An ``Observable`` keeps a registry of interested observers and broadcasts a
"something changed" notification to them. The registry is keyed by a stable
integer handle that every ``Observer`` receives at construction and stores
weak references only, so an observer can go away without unregistering and
without leaving a dangling entry behind.

Observers, on the other hand, hold strong references to what they observe
(an instrument keeps its engine and curves alive, not the other way round).

Notification is synchronous: ``notify_observers`` returns only after every
observer's ``update`` has returned. It always iterates over a snapshot of the
registry, so observers may register or unregister while being notified.

Failure policy
--------------
A failing observer never prevents the remaining observers from being
notified. What happens to the failure afterwards is a module-wide policy:

- ``"raise"`` (default): once everybody has been notified, a
  ``NotificationError`` carrying the original exceptions is raised.
- ``"log"``: each failure is logged with its traceback and dropped.
"""

import abc
import itertools
import logging
import weakref

from .errors import NotificationError

logger = logging.getLogger(__name__)

ERROR_POLICIES = ("raise", "log")

_error_policy = "raise"
_handles = itertools.count(1)


def set_error_policy(policy):
    """Select how observer failures are reported (``"raise"`` or ``"log"``)."""
    global _error_policy
    if policy not in ERROR_POLICIES:
        raise ValueError(f"unknown observer error policy {policy!r}")
    _error_policy = policy


def get_error_policy():
    return _error_policy


class Observable:
    """Broadcasts change notifications to registered observers."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._observers = {}

    def register_observer(self, observer):
        """Subscribe ``observer``. Returns False if it was already registered."""
        handle = observer.observer_handle
        ref = self._observers.get(handle)
        if ref is not None and ref() is not None:
            return False
        self._observers[handle] = weakref.ref(observer)
        return True

    def unregister_observer(self, observer):
        """Unsubscribe ``observer``. Returns False if it was not registered."""
        return self._observers.pop(observer.observer_handle, None) is not None

    def observer_count(self):
        self._prune()
        return len(self._observers)

    def notify_observers(self):
        errors = []
        for handle, ref in list(self._observers.items()):
            observer = ref()
            if observer is None:
                self._observers.pop(handle, None)
                continue
            try:
                observer.update()
            except Exception as exc:
                errors.append(exc)
                if _error_policy == "log":
                    logger.exception(
                        "%s failed while handling a notification from %s",
                        type(observer).__name__,
                        type(self).__name__,
                    )
        if errors and _error_policy == "raise":
            raise NotificationError(errors)

    def _prune(self):
        dead = [h for h, ref in self._observers.items() if ref() is None]
        for h in dead:
            del self._observers[h]


class Observer(abc.ABC):
    """Receives notifications from the observables it registered with."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.observer_handle = next(_handles)
        self._observables = {}

    def register_with(self, observable):
        if observable is None:
            return False
        self._observables[id(observable)] = observable
        return observable.register_observer(self)

    def unregister_with(self, observable):
        if observable is None:
            return False
        self._observables.pop(id(observable), None)
        return observable.unregister_observer(self)

    def unregister_with_all(self):
        for observable in list(self._observables.values()):
            observable.unregister_observer(self)
        self._observables.clear()

    def observables(self):
        return list(self._observables.values())

    @abc.abstractmethod
    def update(self):
        """Called when something this observer depends on changed."""
        raise NotImplementedError
