"""Suppression files: a checked-in baseline of accepted incompatibilities.

Format::

    {
      "suppressions": [
        {"rule_id": "CP0001", "target": "T:NS.Removed"}
      ]
    }
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Union

from ..config import SuppressionEntry, parse_suppressions
from ..exceptions import InvalidConfigError, SuppressionFileError
from ..logging_config import get_logger
from .differences import CompatDifference

logger = get_logger(__name__)


def load_suppression_file(path: Union[str, Path]) -> frozenset[SuppressionEntry]:
    """Load (rule id, target) suppression entries from a JSON file.

    Returns:
        Set of entries.  Empty if the file does not exist.

    Raises:
        SuppressionFileError: If the file is not valid JSON or has the wrong shape
    """
    p = Path(path)
    if not p.exists():
        logger.info(f"No suppression file at {p}")
        return frozenset()

    try:
        with open(p, encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise SuppressionFileError(p, str(e)) from e

    if not isinstance(raw, dict) or not isinstance(raw.get("suppressions", []), list):
        raise SuppressionFileError(p, "expected an object with a 'suppressions' list")

    try:
        entries = parse_suppressions(raw.get("suppressions", []))
    except InvalidConfigError as e:
        raise SuppressionFileError(p, e.reason) from e

    logger.info(f"Loaded {len(entries)} suppressions from {p}")
    return entries


def write_suppression_file(
    path: Union[str, Path],
    differences: Iterable[CompatDifference],
) -> int:
    """Write every difference as a suppression entry.

    Entries are de-duplicated and sorted by (rule id, target) so regenerated
    files diff cleanly.

    Returns:
        Number of entries written
    """
    entries = sorted({(d.rule_id, d.target) for d in differences})
    data = {
        "suppressions": [{"rule_id": rule_id, "target": target} for rule_id, target in entries]
    }

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with open(p, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.write("\n")

    logger.info(f"Wrote {len(entries)} suppressions to {p}")
    return len(entries)
