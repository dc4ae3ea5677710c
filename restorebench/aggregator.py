"""Reduction of accumulated samples into per-solution statistics."""
import logging
import math
from typing import Dict, Iterable, List, Tuple

import numpy as np

from restorebench.store import ExperimentStore, SolutionStats

logger = logging.getLogger(__name__)


def mean_std_dev(values: Iterable[float]) -> Tuple[float, float]:
    """Mean and population standard deviation (denominator n).

    An empty input has no mean; (nan, nan) is returned instead of letting
    numpy warn about an empty slice. Infinite or NaN samples propagate as
    inf/nan.
    """
    data = np.asarray(list(values), dtype=float)
    if data.size == 0:
        return (math.nan, math.nan)
    with np.errstate(over='ignore', invalid='ignore'):
        mean = data.mean()
        std_dev = np.sqrt(np.mean((data - mean) ** 2))
    return (float(mean), float(std_dev))


def experiment_totals(partials_by_experiment: Dict[int, List[float]]) -> List[float]:
    """Total footprint of each experiment, i.e. the sum of its partial readings.

    Overflow gives inf and inf + -inf gives nan, as in IEEE addition.
    """
    with np.errstate(over='ignore', invalid='ignore'):
        return [float(np.sum(partials, dtype=float)) for partials in partials_by_experiment.values()]


def finalize(stats: SolutionStats) -> SolutionStats:
    """Computes the derived sequences and statistics of one solution in place."""
    stats.all_durations = list(stats.duration_by_experiment.values())
    stats.all_footprint_totals = experiment_totals(stats.footprint_partials_by_experiment)

    stats.duration_mean, stats.duration_std_dev = mean_std_dev(stats.all_durations)
    stats.footprint_mean, stats.footprint_std_dev = mean_std_dev(stats.all_footprint_totals)
    stats.finalized = True

    name = stats.name.value
    if not stats.all_durations:
        logger.warning(f"No restore duration samples for '{name}'; mean and std dev are undefined.")
    if not stats.all_footprint_totals:
        logger.warning(f"No memory footprint samples for '{name}'; mean and std dev are undefined.")
    logger.info(
        f"{name}: {len(stats.all_durations)} durations, "
        f"{len(stats.all_footprint_totals)} footprint totals"
    )
    return stats


def finalize_store(store: ExperimentStore) -> ExperimentStore:
    for stats in store:
        finalize(stats)
    return store
