# backend/utils/submission.py
"""
Sale submission state per tenant user.

    Idle -> Submitting -> Succeeded(invoice) | Failed(reason)

Succeeded and Failed accept a new submission; Submitting does not, so the same
user cannot post a second sale while the first is still being written.
"""
import threading
from dataclasses import dataclass
from typing import ClassVar, Dict, Hashable, Optional, Union


class SubmissionInProgress(RuntimeError):
    pass


@dataclass(frozen=True)
class Idle:
    status: ClassVar[str] = "idle"


@dataclass(frozen=True)
class Submitting:
    status: ClassVar[str] = "submitting"


@dataclass(frozen=True)
class Succeeded:
    invoice_number: str
    sale_id: int
    status: ClassVar[str] = "succeeded"


@dataclass(frozen=True)
class Failed:
    reason: str
    status: ClassVar[str] = "failed"


SubmissionState = Union[Idle, Submitting, Succeeded, Failed]


def state_to_dict(state: SubmissionState) -> dict:
    out = {"status": state.status, "invoice_number": None, "sale_id": None, "reason": None}
    if isinstance(state, Succeeded):
        out.update(invoice_number=state.invoice_number, sale_id=state.sale_id)
    elif isinstance(state, Failed):
        out["reason"] = state.reason
    return out


class SubmissionTracker:
    def __init__(self):
        self._lock = threading.Lock()
        self._states: Dict[Hashable, SubmissionState] = {}

    def get(self, key: Hashable) -> SubmissionState:
        with self._lock:
            return self._states.get(key, Idle())

    def begin(self, key: Hashable) -> None:
        with self._lock:
            if isinstance(self._states.get(key), Submitting):
                raise SubmissionInProgress("A sale is already being submitted")
            self._states[key] = Submitting()

    def _finish(self, key: Hashable, state: SubmissionState) -> None:
        with self._lock:
            if not isinstance(self._states.get(key), Submitting):
                raise RuntimeError(f"No submission in progress for {key!r}")
            self._states[key] = state

    def succeed(self, key: Hashable, invoice_number: str, sale_id: int) -> None:
        self._finish(key, Succeeded(invoice_number, sale_id))

    def fail(self, key: Hashable, reason: Optional[str]) -> None:
        self._finish(key, Failed(reason or "Failed to process sale. Please try again."))

    def reset(self) -> None:
        with self._lock:
            self._states.clear()


# Shared by the API worker threads of one process
tracker = SubmissionTracker()
