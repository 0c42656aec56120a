from __future__ import annotations
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone


class InvalidTransition(ValueError):
    pass


HistoryEntry = Dict[str, Any]

# product mutation workflow states
AUTHORIZING = "authorizing"
VALIDATING_INPUT = "validating_input"
UPLOADING_MEDIA = "uploading_media"
PERSISTING = "persisting"
DONE = "done"
FAILED = "failed"

TERMINAL_STATES = (DONE, FAILED)

WORKFLOW_TRANSITIONS: Dict[str, List[str]] = {
    AUTHORIZING: [VALIDATING_INPUT, FAILED],
    VALIDATING_INPUT: [UPLOADING_MEDIA, FAILED],
    UPLOADING_MEDIA: [PERSISTING, FAILED],
    PERSISTING: [DONE, FAILED],
    DONE: [],
    FAILED: [],
}


class StateMachine:
    """
    Small, generic state machine with:
      - allowed transitions map
      - history recording (with metadata)
      - a terminal `failed` state carrying the failure reason

    Usage:
      sm = StateMachine(state=AUTHORIZING, allowed_transitions=WORKFLOW_TRANSITIONS)
      sm.apply(VALIDATING_INPUT)
      ...
      sm.fail("UploadError", meta={"message": str(exc)})
    """

    def __init__(self, state: str, allowed_transitions: Dict[str, List[str]],
                 history: Optional[List[HistoryEntry]] = None):
        self.state = state or ""
        self.allowed_transitions = allowed_transitions or {}
        self.history: List[HistoryEntry] = list(history or [])
        self.failure_reason: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return not self.allowed_transitions.get(self.state)

    def can_transition(self, to_state: str) -> bool:
        allowed = self.allowed_transitions.get(self.state, [])
        return to_state in allowed

    def apply(self, to_state: str, meta: Optional[Dict[str, Any]] = None) -> HistoryEntry:
        """
        Transition to `to_state`. Raises InvalidTransition if the move is not allowed.
        Returns the recorded history entry.
        """
        to_state = (to_state or "").strip()
        if not to_state:
            raise InvalidTransition("Empty target state")

        if not self.can_transition(to_state):
            raise InvalidTransition(f"Invalid transition: {self.state} -> {to_state}")

        entry: HistoryEntry = {
            "from": self.state,
            "to": to_state,
            "at": datetime.now(timezone.utc).isoformat(),
            "meta": dict(meta or {}),
        }
        self.state = to_state
        self.history.append(entry)
        return entry

    def fail(self, reason: str, meta: Optional[Dict[str, Any]] = None) -> HistoryEntry:
        """Move to `failed` from any non-terminal state, remembering the reason."""
        data = dict(meta or {})
        data["reason"] = reason
        entry = self.apply(FAILED, meta=data)
        self.failure_reason = reason
        return entry
