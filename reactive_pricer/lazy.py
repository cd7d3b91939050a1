"""Lazily recalculated, memoised graph nodes."""

import abc
import logging

from .observable import Observable, Observer

logger = logging.getLogger(__name__)


class LazyObject(Observable, Observer):
    """Node that caches its last result and recomputes only when read.

    The node is *Fresh* when ``is_calculated()`` is True and *Stale*
    otherwise. ``update()`` (a notification from anything the node observes)
    makes it Stale; ``calculate()`` brings it back to Fresh by running
    ``perform_calculations()``.

    Forwarding policy
    -----------------
    The first notification that turns a Fresh node Stale is always forwarded
    to the node's own observers. Further notifications received while the
    node is already Stale are forwarded only when the node was told to
    ``always_forward_notifications()``; by default they are absorbed, since
    dependents were already told the node changed.

    Notifications that arrive while the node is running its own
    ``perform_calculations()`` mark it Stale for the next ``calculate()`` but
    are neither forwarded nor acted upon. Dependency graphs must be acyclic;
    no cycle detection is performed.

    A frozen node keeps its current results, does not forward notifications
    and does not recalculate until ``unfreeze()`` is called.
    """

    def __init__(self, always_forward=False):
        super().__init__()
        self._calculated = False
        self._calculating = False
        self._frozen = False
        self._always_forward = bool(always_forward)

    # ------------------------------------------------------------------
    # Observer interface
    # ------------------------------------------------------------------
    def update(self):
        if self._calculating:
            self._calculated = False
            return
        was_calculated = self._calculated
        self._calculated = False
        if self._frozen:
            return
        if was_calculated or self._always_forward:
            self.notify_observers()

    # ------------------------------------------------------------------
    # Calculation
    # ------------------------------------------------------------------
    def calculate(self):
        """Recompute if Stale; a no-op when Fresh, frozen or already running."""
        if self._calculated or self._frozen or self._calculating:
            return
        logger.debug("recalculating %s", type(self).__name__)
        self._calculating = True
        self._calculated = True
        try:
            self.perform_calculations()
        except Exception:
            self._calculated = False
            raise
        finally:
            self._calculating = False

    def recalculate(self):
        """Force a recalculation regardless of the cached state.

        Observers are notified once the recalculation succeeded. A failure
        propagates unchanged and leaves the node stale.
        """
        was_frozen = self._frozen
        self._calculated = False
        self._frozen = False
        try:
            self.calculate()
        finally:
            self._frozen = was_frozen
        self.notify_observers()

    force_recalculation = recalculate

    @abc.abstractmethod
    def perform_calculations(self):
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Policies and inspectors
    # ------------------------------------------------------------------
    def freeze(self):
        self._frozen = True

    def unfreeze(self):
        if self._frozen:
            self._frozen = False
            # results may be outdated; let dependents know
            self.notify_observers()

    def always_forward_notifications(self):
        self._always_forward = True

    def forward_first_notification_only(self):
        self._always_forward = False

    def is_calculated(self):
        return self._calculated

    def is_calculating(self):
        return self._calculating

    def is_frozen(self):
        return self._frozen

    def forwards_all_notifications(self):
        return self._always_forward
