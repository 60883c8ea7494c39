"""Optimistic projection of a companion view.

Shows a speculative state before a workflow call resolves, then either
replaces it with the authoritative result or rolls back to the original.
Holds no persistence of its own.

Usage:
    coordinator = OptimisticUpdateCoordinator(current)
    coordinator.subscribe(render)
    coordinator.run(preview_care(current), lambda: care_service.care(current.id))
"""

import logging
import uuid
from typing import Callable, List, Optional

from src.core.companion.care import apply_care
from src.core.companion.models import Companion, CompanionKind

logger = logging.getLogger(__name__)

ViewListener = Callable[[Optional[Companion]], None]


def preview_care(view: Companion) -> Companion:
    """Projected result of care(), same rules as CareService."""
    return apply_care(view)


def preview_adoption(owner_id: str, name: str, kind: CompanionKind | str) -> Companion:
    """Projected new companion. The id is provisional until reconciled."""
    return Companion(
        id=f"pending-{uuid.uuid4()}",
        owner_id=owner_id,
        name=name.strip(),
        kind=CompanionKind(kind),
    )


class OptimisticUpdateCoordinator:
    """Speculate / reconcile / rollback over a single companion view.

    Only one speculation may be pending at a time.
    """

    def __init__(self, view: Optional[Companion] = None) -> None:
        self._view = view
        self._original: Optional[Companion] = None
        self._pending = False
        self._listeners: List[ViewListener] = []

    @property
    def view(self) -> Optional[Companion]:
        return self._view

    @property
    def pending(self) -> bool:
        return self._pending

    def subscribe(self, listener: ViewListener) -> None:
        """Register a callback for every visible view change."""
        self._listeners.append(listener)

    def _publish(self, view: Optional[Companion]) -> None:
        self._view = view
        for listener in self._listeners:
            listener(view)

    def speculate(self, preview: Optional[Companion]) -> Optional[Companion]:
        """Make the provisional view visible immediately."""
        if self._pending:
            raise RuntimeError("A speculative update is already pending")
        self._original = self._view
        self._pending = True
        self._publish(preview)
        return preview

    def reconcile(self, result: Companion) -> Companion:
        """Replace the provisional view with the authoritative result.

        Discrepancies with the projection simply overwrite it.
        """
        if self._pending and result != self._view:
            logger.debug("Projection differed from result for companion %s", result.id)
        self._pending = False
        self._original = None
        self._publish(result)
        return result

    def rollback(self, error: Optional[BaseException] = None) -> Optional[Companion]:
        """Discard the provisional view and restore the original.

        Re-raises error when given, so the failure reaches the caller.
        """
        original = self._original
        self._pending = False
        self._original = None
        self._publish(original)
        if error is not None:
            raise error
        return original

    def run(
        self,
        preview: Optional[Companion],
        call: Callable[[], Companion],
    ) -> Companion:
        """speculate → call → reconcile, or rollback and re-raise on failure."""
        self.speculate(preview)
        try:
            result = call()
        except Exception:
            logger.info("Workflow failed, rolling back projection")
            self.rollback()
            raise
        return self.reconcile(result)
