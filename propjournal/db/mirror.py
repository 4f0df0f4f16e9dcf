"""Local offline copy of journals, one JSON file per storage key."""

from pathlib import Path
from typing import Optional
from urllib.parse import quote

from propjournal.models import TradingJournalData

STORAGE_KEY_PREFIX = "prop-trading-journal-data"


def storage_key(user_id: Optional[str]) -> str:
    """Storage key for a user, or the anonymous key when there is none."""
    if user_id:
        return f"{STORAGE_KEY_PREFIX}-user-{user_id}"
    return f"{STORAGE_KEY_PREFIX}-anonymous"


class JournalMirror:
    """Directory of journal JSON files keyed by storage key."""

    def __init__(self, mirror_dir: Path):
        self.mirror_dir = mirror_dir
        self.mirror_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        """File for a storage key, always directly inside ``mirror_dir``."""
        return self.mirror_dir / f"{quote(key, safe='')}.json"

    def read(self, key: str) -> Optional[TradingJournalData]:
        """Read a mirrored journal.

        Raises:
            pydantic.ValidationError: If the file is corrupt.
        """
        path = self.path_for(key)
        if not path.exists():
            return None
        return TradingJournalData.model_validate_json(path.read_text(encoding="utf-8"))

    def write(self, key: str, journal: TradingJournalData) -> None:
        path = self.path_for(key)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(journal.model_dump_json(indent=2), encoding="utf-8")
        tmp_path.replace(path)

    def remove(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)
