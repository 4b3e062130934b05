"""State machine for export invocations.

Deterministic state machine that defines the stages one export call
walks through and the transitions between them.
"""

from dataclasses import dataclass, field
from enum import Enum

from searchfeed.domain.exceptions import InvalidStateTransitionError


class ExportStage(str, Enum):
    """Export invocation stages.

    State diagram:
        RESOLVING_SHOPKEY ─────────────────────────────► FAILED
          │                                               ▲
          │ shopkey bound                                 │
          ▼                                               │
        COMPUTING_TOTAL                                   │
          │                                               │
          ▼                                               │
        FETCHING_PAGE                                     │
          │                                               │
          ▼                                               │
        BUILDING_ITEMS                                    │
          │                                               │
          ▼                                               │
        SERIALIZING ──────────── errors recorded ─────────┘
          │
          │ no errors
          ▼
        DONE
    """

    RESOLVING_SHOPKEY = "resolving_shopkey"
    COMPUTING_TOTAL = "computing_total"
    FETCHING_PAGE = "fetching_page"
    BUILDING_ITEMS = "building_items"
    SERIALIZING = "serializing"
    DONE = "done"
    FAILED = "failed"

    def can_transition_to(self, target: "ExportStage") -> bool:
        """Check if transition to target stage is valid.

        Args:
            target: Target stage to transition to.

        Returns:
            True if transition is valid.
        """
        return target in _EXPORT_TRANSITIONS.get(self, set())

    def allowed_transitions(self) -> list["ExportStage"]:
        """Get list of valid target stages.

        Returns:
            List of stages that can be transitioned to.
        """
        return list(_EXPORT_TRANSITIONS.get(self, set()))

    def is_terminal(self) -> bool:
        """Check if this is a terminal (final) stage.

        Returns:
            True if no further transitions are possible.
        """
        return len(_EXPORT_TRANSITIONS.get(self, set())) == 0


_EXPORT_TRANSITIONS: dict[ExportStage, set[ExportStage]] = {
    ExportStage.RESOLVING_SHOPKEY: {ExportStage.COMPUTING_TOTAL, ExportStage.FAILED},
    ExportStage.COMPUTING_TOTAL: {ExportStage.FETCHING_PAGE},
    ExportStage.FETCHING_PAGE: {ExportStage.BUILDING_ITEMS},
    ExportStage.BUILDING_ITEMS: {ExportStage.SERIALIZING},
    ExportStage.SERIALIZING: {ExportStage.DONE, ExportStage.FAILED},
    ExportStage.DONE: set(),  # Terminal state
    ExportStage.FAILED: set(),  # Terminal state
}


@dataclass
class ExportProgress:
    """Tracks the stage of one export invocation.

    Attributes:
        export_id: Identifier used in error messages and logs.
        stage: Current stage.
        history: Stages visited so far, in order.
    """

    export_id: str
    stage: ExportStage = ExportStage.RESOLVING_SHOPKEY
    history: list[ExportStage] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.history:
            self.history.append(self.stage)

    def advance(self, target: ExportStage) -> None:
        """Move to the next stage.

        Args:
            target: Stage to enter.

        Raises:
            InvalidStateTransitionError: If the transition is not allowed.
        """
        validate_export_transition(self.export_id, self.stage, target)
        self.stage = target
        self.history.append(target)


def validate_export_transition(
    export_id: str,
    current_stage: ExportStage,
    target_stage: ExportStage,
) -> None:
    """Validate and raise if export stage transition is invalid.

    Args:
        export_id: Export identifier for error message.
        current_stage: Current stage.
        target_stage: Target stage.

    Raises:
        InvalidStateTransitionError: If transition is not valid.
    """
    if not current_stage.can_transition_to(target_stage):
        raise InvalidStateTransitionError(
            entity_type="Export",
            entity_id=export_id,
            current_state=current_stage.value,
            target_state=target_stage.value,
            allowed_transitions=[s.value for s in current_stage.allowed_transitions()],
        )
