"""
Historical draft record files.

Each file holds one league/year draft in the export format:

    {
      "draftId": "...", "year": "2023", "league": "premier",
      "draftOrder": {"<member id>": 1, ...},
      "picks": [{"pickNumber": 1, "round": 1, "draftSlot": 1, "pickedBy": "<member id>",
                 "player": {"name": "...", "position": "RB", "team": "SF"}}, ...],
      "settings": {"teams": 12, "rounds": 15, "draftType": "snake"}
    }
"""

import json
import logging
from pathlib import Path
from typing import List, Union

from pydantic import ValidationError

from ..datamodels.draft_record import DraftRecord

logger = logging.getLogger(__name__)


def load_draft_record(path: Union[str, Path]) -> DraftRecord:
    """
    Load and validate one draft record file.

    Raises:
        FileNotFoundError: if the file does not exist
        ValueError: if the file is not valid JSON or fails validation
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Draft record not found: {path}")

    try:
        with path.open(encoding="utf-8") as handle:
            data = json.load(handle)
        return DraftRecord.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        logger.error(f"Invalid draft record {path.name}: {e}")
        raise ValueError(f"Invalid draft record {path.name}: {e}") from e


def load_draft_records(directory: Union[str, Path]) -> List[DraftRecord]:
    """Load every ``*.json`` record in a directory, ordered by year then draft id."""
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Draft record directory not found: {directory}")

    records = [load_draft_record(path) for path in sorted(directory.glob("*.json"))]
    records.sort(key=lambda r: (r.year, r.draft_id))

    logger.info(f"Loaded {len(records)} draft records from {directory}")
    return records
