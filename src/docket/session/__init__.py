"""Session subsystem public API.

Public API:
- SessionManager: command surface over one SessionState
- AutosaveWatcher: periodic snapshot writer
- load_snapshot / dump_snapshot: snapshot codec
"""

from docket.session.autosave import AutosaveWatcher
from docket.session.effects import CompletionEffects, NullEffects
from docket.session.manager import Change, Outcome, SessionManager, load_state
from docket.session.snapshot import SnapshotError, dump_snapshot, load_snapshot
from docket.session.state import SNAPSHOT_VERSION, SessionState

__all__ = [
    "SNAPSHOT_VERSION",
    "AutosaveWatcher",
    "Change",
    "CompletionEffects",
    "NullEffects",
    "Outcome",
    "SessionManager",
    "SessionState",
    "SnapshotError",
    "dump_snapshot",
    "load_snapshot",
    "load_state",
]
