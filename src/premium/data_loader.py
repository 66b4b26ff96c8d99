from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from premium.errors import DataLoadError

logger = logging.getLogger(__name__)


def load_table(path: str | Path, sep: str = ",") -> pd.DataFrame:
    """
    Read a delimited file with a header row. Numeric columns come back as
    numbers, everything else as strings; blank lines are skipped.
    """
    csv_path = Path(path)
    try:
        frame = pd.read_csv(csv_path, sep=sep, skip_blank_lines=True, skipinitialspace=True)
    except FileNotFoundError as exc:
        raise DataLoadError(f"File not found: {csv_path}") from exc
    except pd.errors.EmptyDataError as exc:
        raise DataLoadError(f"File has no header row: {csv_path}") from exc
    except (pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise DataLoadError(f"Could not parse {csv_path}: {exc}") from exc
    except OSError as exc:
        raise DataLoadError(f"Could not read {csv_path}: {exc}") from exc

    frame.columns = [str(c).strip() for c in frame.columns]
    if all(not c or c.startswith("Unnamed:") for c in frame.columns):
        raise DataLoadError(f"File has an empty header row: {csv_path}")
    logger.info("Loaded %d rows x %d columns from %s", len(frame), len(frame.columns), csv_path)
    return frame
