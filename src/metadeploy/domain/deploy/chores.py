"""One-shot maintenance actions tracked by persisted completion markers."""

from __future__ import annotations

import logging
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from time import perf_counter
from typing import TYPE_CHECKING, ClassVar, TextIO

if TYPE_CHECKING:
    from collections.abc import Iterable

    from metadeploy.domain.ports.persistence import SessionSync, SettingsRepository

log = logging.getLogger(__name__)

MARKER_DONE = "true"


class Chore(ABC):
    """Action which should run once over the lifetime of an installation."""

    id: ClassVar[str]

    @abstractmethod
    def perform(self, output: TextIO) -> None: ...


@dataclass(slots=True)
class ChoreRunner:
    """Run chores and record their completion markers.

    ``perform_chore`` does not check the marker itself; callers that need
    at-most-once semantics use ``is_done`` or ``perform_pending``.
    """

    session: SessionSync
    settings: SettingsRepository
    marker_suffix: str = ".done"
    output: TextIO | None = None

    def marker_name(self, chore: Chore) -> str:
        return f"{chore.id}{self.marker_suffix}"

    def is_done(self, chore: Chore) -> bool:
        return self.settings.get_value(self.marker_name(chore)) == MARKER_DONE

    def perform_chore(self, chore: Chore) -> None:
        log.info("Performing chore '%s'...", chore.id)
        output = self.output or sys.stdout

        start = perf_counter()
        chore.perform(output)
        output.flush()

        self.session.flush()
        self.session.clear()

        log.info("Performed chore '%s' in %.0fms", chore.id, (perf_counter() - start) * 1000)

        self.settings.set_value(self.marker_name(chore), MARKER_DONE)

    def perform_pending(self, chores: Iterable[Chore]) -> list[str]:
        """Perform each chore not yet marked done, returning the ids performed."""

        performed: list[str] = []
        for chore in chores:
            if self.is_done(chore):
                log.debug("Skipping chore '%s' (already done)", chore.id)
                continue
            self.perform_chore(chore)
            performed.append(chore.id)
        return performed
