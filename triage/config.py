"""Runtime settings for the triage desk."""

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_STATE_FILE = "triage_state.json"


@dataclass
class TriageSettings:
    state_file: Path = Path(DEFAULT_STATE_FILE)
    window_title: str = "ER Triage Desk"
    history_limit: int = 500  # points kept in the waiting-count plot

    def __post_init__(self):
        self.state_file = Path(self.state_file)
        self.history_limit = max(int(self.history_limit), 1)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "TriageSettings":
        """Build settings for the entry point, honouring ``TRIAGE_STATE_FILE``."""
        env = os.environ if environ is None else environ
        settings = cls()
        state_file = env.get("TRIAGE_STATE_FILE")
        if state_file:
            settings.state_file = Path(state_file)
        return settings
