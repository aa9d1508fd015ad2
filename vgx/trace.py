"""Stage-level counters for the graph pipeline."""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Dict, List, Optional

logger = logging.getLogger("vgx.trace")


@dataclasses.dataclass(slots=True)
class StageEvent:
    stage: str
    nodes_in: int
    relationships_in: int
    nodes_out: int
    relationships_out: int
    detail: Dict[str, Any] = dataclasses.field(default_factory=dict)


class GraphTrace:
    """Collects one :class:`StageEvent` per stage and logs it at DEBUG."""

    def __init__(self):
        self.events: List[StageEvent] = []

    def record(self, stage: str, before, after, **detail) -> StageEvent:
        event = StageEvent(
            stage=stage,
            nodes_in=before[0],
            relationships_in=before[1],
            nodes_out=after[0],
            relationships_out=after[1],
            detail=detail,
        )
        self.events.append(event)
        logger.debug(
            "%s: %d nodes, %d relationships -> %d nodes, %d relationships %s",
            stage, event.nodes_in, event.relationships_in, event.nodes_out, event.relationships_out, detail or "",
        )
        return event

    def stage(self, name: str) -> Optional[StageEvent]:
        for event in reversed(self.events):
            if event.stage == name:
                return event
        return None

    def stages(self) -> List[str]:
        return [e.stage for e in self.events]
