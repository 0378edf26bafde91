"""
JSON-based storage for the training state.

Handles reading, writing and recovering the state file.  Every save also
writes a ``.bak`` snapshot next to the main file so a truncated or
half-written state can be recovered from the last good copy.
"""

import logging
from pathlib import Path

from ..core.models import TrainingState
from .serializers import (
    ValidationError,
    json_to_training_state,
    training_state_to_json,
)

logger = logging.getLogger(__name__)


def pick_best_snapshot(candidates: list[TrainingState | None]) -> TrainingState | None:
    """
    Choose the snapshot to restore from a ranked list of candidates.

    The candidate with the most logged lift entries wins; on a tie the
    earlier (higher-ranked) candidate is kept.  ``None`` candidates
    (unreadable snapshots) are skipped.

    Returns:
        The chosen TrainingState, or None if no candidate is usable
    """
    best: TrainingState | None = None
    best_count = -1
    for candidate in candidates:
        if candidate is None:
            continue
        count = candidate.entry_count()
        if count > best_count:
            best = candidate
            best_count = count
    return best


class StateStore:
    """
    Manages the training state stored as a single JSON document.

    The main file holds the full state; ``<name>.bak`` holds the previous
    successful save.
    """

    def __init__(self, state_path: str | Path):
        """
        Initialize the state store.

        Args:
            state_path: Path to the JSON state file
        """
        self.state_path = Path(state_path)
        self.backup_path = self.state_path.with_name(self.state_path.name + ".bak")

    def exists(self) -> bool:
        """Check if the state file exists."""
        return self.state_path.exists()

    def init(self) -> None:
        """
        Initialize an empty state file if it doesn't exist.

        Creates parent directories if needed.
        """
        self.state_path.parent.mkdir(parents=True, exist_ok=True)

        if not self.state_path.exists():
            self._write(self.state_path, TrainingState())

    def load(self) -> TrainingState:
        """
        Load the training state.

        Returns:
            TrainingState with entries in chronological order

        Raises:
            FileNotFoundError: If the state file doesn't exist
            ValidationError: If the file is not valid JSON
        """
        if not self.state_path.exists():
            raise FileNotFoundError(
                f"State file not found: {self.state_path}. Run 'init' first."
            )
        return self._read(self.state_path)

    def save(self, state: TrainingState) -> None:
        """
        Write the state, keeping the previous good file as a backup.

        Args:
            state: State to persist
        """
        self.state_path.parent.mkdir(parents=True, exist_ok=True)

        if self.state_path.exists():
            try:
                previous = self._read(self.state_path)
            except ValidationError as e:
                logger.warning("not backing up unreadable %s: %s", self.state_path, e)
            else:
                self._write(self.backup_path, previous)

        self._write(self.state_path, state)

    def recover(self) -> TrainingState:
        """
        Restore the best available snapshot over the main file.

        Candidates are ranked main file first, then the backup; the one
        with the most lift entries is written back as the main state.

        Returns:
            The restored state (empty if nothing is readable)
        """
        candidates = [self._try_read(self.state_path), self._try_read(self.backup_path)]
        best = pick_best_snapshot(candidates)
        if best is None:
            logger.warning("no readable snapshot at %s; starting empty", self.state_path)
            best = TrainingState()

        self.state_path.parent.mkdir(parents=True, exist_ok=True)
        self._write(self.state_path, best)
        return best

    def _read(self, path: Path) -> TrainingState:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
        try:
            return json_to_training_state(text)
        except ValidationError as e:
            raise ValidationError(f"Error parsing {path}: {e}") from e

    def _try_read(self, path: Path) -> TrainingState | None:
        if not path.exists():
            return None
        try:
            return self._read(path)
        except (OSError, ValidationError) as e:
            logger.warning("skipping snapshot %s: %s", path, e)
            return None

    def _write(self, path: Path, state: TrainingState) -> None:
        with open(path, "w", encoding="utf-8") as f:
            f.write(training_state_to_json(state) + "\n")


def get_default_state_path() -> Path:
    """Default state file: ~/.liftlog/state.json."""
    return Path.home() / ".liftlog" / "state.json"


def get_default_store() -> StateStore:
    """
    Get a StateStore with the default path.

    Returns:
        StateStore instance
    """
    return StateStore(get_default_state_path())
