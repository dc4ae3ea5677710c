"""Reading and parsing of the experiments CSV.

CSV schema (one row per sample, header first):
ReplicaSet,Solution,Experiment,SmocId,RestoreDurationInSec,VmPeak,VmSize,VmHWM,VmRSS,VmData,DeltaMemoryUsageInKbFromTop
"""
import csv
import io
import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence

import pandas as pd

from restorebench.errors import (
    ExperimentInputError,
    MalformedFieldError,
    MalformedRowError,
)

logger = logging.getLogger(__name__)

# --- CONFIGURATION ---
CSV_COLUMNS = [
    'ReplicaSet', 'Solution', 'Experiment', 'SmocId', 'RestoreDurationInSec',
    'VmPeak', 'VmSize', 'VmHWM', 'VmRSS', 'VmData', 'DeltaMemoryUsageInKbFromTop',
]
SOLUTION_COLUMN = 1
EXPERIMENT_COLUMN = 2
SAMPLE_TAG_COLUMN = 3
DURATION_COLUMN = 4
# VmRSS is the footprint metric, not VmPeak or VmSize.
RSS_COLUMN = 8

# smoc1..smoc4 report memory, smoc5 reports the restore duration.
DURATION_TAG = "smoc5"

_INT_PATTERN = re.compile(r"\s*[+-]?\d+\s*", re.ASCII)
# Plain decimal or exponent notation, or inf/infinity/nan; no underscores or padding.
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.ASCII | re.IGNORECASE,
)


class SampleKind(Enum):
    DURATION = "duration"
    FOOTPRINT = "footprint"


@dataclass(frozen=True)
class MeasurementRow:
    """One parsed data row.

    Only one of ``duration_seconds`` / ``memory_reading_kib`` is meaningful,
    depending on ``kind``; the other is 0.0. ``coerced_fields`` names the
    numeric fields that could not be parsed and were replaced by zero.
    """

    solution_name: str
    experiment_index: int
    sample_tag: str
    duration_seconds: float = 0.0
    memory_reading_kib: float = 0.0
    coerced_fields: tuple = ()

    @property
    def kind(self) -> SampleKind:
        if self.sample_tag == DURATION_TAG:
            return SampleKind.DURATION
        return SampleKind.FOOTPRINT


def _parse_int(value: str, field: str, strict: bool, coerced: List[str]) -> int:
    if _INT_PATTERN.fullmatch(value):
        return int(value)
    if strict:
        raise MalformedFieldError(field, value)
    coerced.append(field)
    return 0


def _parse_float(value: str, field: str, strict: bool, coerced: List[str]) -> float:
    if _FLOAT_PATTERN.fullmatch(value):
        return float(value)
    if strict:
        raise MalformedFieldError(field, value)
    coerced.append(field)
    return 0.0


def parse_row(fields: Sequence[str], *, strict: bool = False, line: Optional[int] = None) -> MeasurementRow:
    """Parses one data row into a MeasurementRow.

    Non-numeric experiment, duration or VmRSS values become 0 unless
    ``strict`` is set, in which case MalformedFieldError is raised.
    """
    if len(fields) <= RSS_COLUMN:
        raise MalformedRowError(line or 0, len(fields), RSS_COLUMN + 1)

    coerced: List[str] = []
    solution_name = fields[SOLUTION_COLUMN]
    sample_tag = fields[SAMPLE_TAG_COLUMN]
    experiment = _parse_int(fields[EXPERIMENT_COLUMN], CSV_COLUMNS[EXPERIMENT_COLUMN], strict, coerced)

    if sample_tag == DURATION_TAG:
        duration = _parse_float(fields[DURATION_COLUMN], CSV_COLUMNS[DURATION_COLUMN], strict, coerced)
        row = MeasurementRow(solution_name, experiment, sample_tag, duration_seconds=duration, coerced_fields=tuple(coerced))
    else:
        memory = _parse_float(fields[RSS_COLUMN], CSV_COLUMNS[RSS_COLUMN], strict, coerced)
        row = MeasurementRow(solution_name, experiment, sample_tag, memory_reading_kib=memory, coerced_fields=tuple(coerced))

    if coerced:
        where = f"row {line}" if line is not None else "row"
        logger.warning(f"Non-numeric {', '.join(coerced)} in {where} coerced to 0: {list(fields)}")
    return row


def parse_rows(rows: Iterable[Sequence[str]], *, strict: bool = False) -> Iterator[MeasurementRow]:
    """Parses every row after the first one, which is always the header."""
    for line, fields in enumerate(rows, start=1):
        if line == 1:
            continue
        yield parse_row(fields, strict=strict, line=line)


def _check_field_counts(text: str, path: Path) -> None:
    """Every record must have as many fields as the header."""
    expected = None
    reader = csv.reader(io.StringIO(text, newline=''))
    for fields in reader:
        if not fields:
            continue
        if expected is None:
            expected = len(fields)
        elif len(fields) != expected:
            raise MalformedRowError(reader.line_num, len(fields), expected, source=path)


def read_experiments(path: Path) -> List[List[str]]:
    """Loads the whole CSV, header included, as rows of strings."""
    logger.info(f"Reading experiments from {path}...")
    try:
        with open(path, 'r', encoding='utf-8', newline='') as f:
            text = f.read()
    except FileNotFoundError as e:
        raise ExperimentInputError(f"Experiments file not found: {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ExperimentInputError(f"Can not read experiments from {path}: {e}") from e

    # pandas pads short rows with empty strings, so the field counts are checked first.
    try:
        _check_field_counts(text, path)
    except csv.Error as e:
        raise ExperimentInputError(f"Malformed CSV in {path}: {e}") from e

    try:
        df = pd.read_csv(io.StringIO(text), header=None, dtype=str, keep_default_na=False, na_values=[])
    except pd.errors.EmptyDataError as e:
        raise ExperimentInputError(f"Experiments file is empty: {path}") from e
    except pd.errors.ParserError as e:
        raise ExperimentInputError(f"Malformed CSV in {path}: {e}") from e

    rows = df.values.tolist()
    logger.info(f"Read {len(rows)} rows ({max(len(rows) - 1, 0)} data rows) from {path}")
    return rows
