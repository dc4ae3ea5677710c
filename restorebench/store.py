"""Per-solution accumulation of parsed measurement rows."""
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, List

from restorebench.errors import StoreFinalizedError, UnknownSolutionError
from restorebench.records import MeasurementRow, SampleKind

logger = logging.getLogger(__name__)


class Solution(Enum):
    """The compared solutions, in chart order."""

    DISTRIBUTED = "distributed"
    CENTRALIZED = "centralized"
    CONVENTIONAL = "conventional"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass
class SolutionStats:
    """Raw samples and summary statistics of one solution.

    ``duration_by_experiment`` keeps a single restore duration per experiment
    index, ``footprint_partials_by_experiment`` every VmRSS reading of that
    experiment. The ``all_*`` lists and the statistics are filled by
    ``aggregator.finalize``.
    """

    name: Solution
    duration_by_experiment: Dict[int, float] = field(default_factory=dict)
    footprint_partials_by_experiment: Dict[int, List[float]] = field(default_factory=dict)
    all_durations: List[float] = field(default_factory=list)
    all_footprint_totals: List[float] = field(default_factory=list)
    duration_mean: float = math.nan
    duration_std_dev: float = math.nan
    footprint_mean: float = math.nan
    footprint_std_dev: float = math.nan
    finalized: bool = False
    coerced_rows: int = 0


class ExperimentStore:
    """Aggregation context holding one SolutionStats per known solution."""

    def __init__(self):
        self._solutions: Dict[Solution, SolutionStats] = {
            solution: SolutionStats(name=solution) for solution in Solution
        }

    def __iter__(self) -> Iterator[SolutionStats]:
        return iter(self._solutions.values())

    def __len__(self) -> int:
        return len(self._solutions)

    def get(self, solution: Solution) -> SolutionStats:
        return self._solutions[solution]

    def lookup(self, solution_name: str) -> SolutionStats:
        """Returns the stats for a CSV solution name; unknown names are an error."""
        try:
            solution = Solution(solution_name)
        except ValueError:
            raise UnknownSolutionError(solution_name, [s.value for s in Solution]) from None
        return self._solutions[solution]

    def ingest(self, row: MeasurementRow) -> None:
        stats = self.lookup(row.solution_name)
        if stats.finalized:
            raise StoreFinalizedError(f"Solution '{stats.name.value}' is already finalized")

        if row.coerced_fields:
            stats.coerced_rows += 1

        if row.kind is SampleKind.DURATION:
            previous = stats.duration_by_experiment.get(row.experiment_index)
            if previous is not None:
                logger.debug(
                    f"{stats.name.value} experiment {row.experiment_index}: "
                    f"duration {previous} replaced by {row.duration_seconds}"
                )
            stats.duration_by_experiment[row.experiment_index] = row.duration_seconds
        else:
            stats.footprint_partials_by_experiment.setdefault(row.experiment_index, []).append(row.memory_reading_kib)

    def ingest_all(self, rows: Iterable[MeasurementRow]) -> int:
        count = 0
        for row in rows:
            self.ingest(row)
            count += 1
        return count
