"""Read-only views of the finalized statistics, in chart order."""
from dataclasses import dataclass
from typing import Iterator, Tuple

import pandas as pd

from restorebench.errors import NotFinalizedError
from restorebench.store import ExperimentStore, Solution


@dataclass(frozen=True)
class ReportView:
    """One chart's worth of data: a mean (and std dev) per solution label."""

    title: str
    unit: str
    labels: Tuple[str, ...]
    means: Tuple[float, ...]
    std_devs: Tuple[float, ...]

    def entries(self) -> Iterator[Tuple[str, float]]:
        return zip(self.labels, self.means)


@dataclass(frozen=True)
class Report:
    restore_duration: ReportView
    memory_footprint: ReportView
    sample_counts: Tuple[Tuple[int, int], ...] = ()


def assemble_report(store: ExperimentStore) -> Report:
    """Builds both views in Distributed, Centralized, Conventional order."""
    ordered = [store.get(solution) for solution in Solution]
    pending = [stats.name.value for stats in ordered if not stats.finalized]
    if pending:
        raise NotFinalizedError(f"Solutions not finalized: {', '.join(pending)}")

    labels = tuple(stats.name.label for stats in ordered)
    restore_duration = ReportView(
        title="Restore Duration",
        unit="sec",
        labels=labels,
        means=tuple(stats.duration_mean for stats in ordered),
        std_devs=tuple(stats.duration_std_dev for stats in ordered),
    )
    memory_footprint = ReportView(
        title="Memory Footprint",
        unit="KiB",
        labels=labels,
        means=tuple(stats.footprint_mean for stats in ordered),
        std_devs=tuple(stats.footprint_std_dev for stats in ordered),
    )
    counts = tuple((len(stats.all_durations), len(stats.all_footprint_totals)) for stats in ordered)
    return Report(restore_duration, memory_footprint, counts)


def summary_frame(report: Report) -> pd.DataFrame:
    duration, footprint = report.restore_duration, report.memory_footprint
    df = pd.DataFrame({
        'solution': list(duration.labels),
        'duration_mean_sec': list(duration.means),
        'duration_std_sec': list(duration.std_devs),
        'footprint_mean_kib': list(footprint.means),
        'footprint_std_kib': list(footprint.std_devs),
    })
    if report.sample_counts:
        df['duration_samples'] = [count[0] for count in report.sample_counts]
        df['footprint_samples'] = [count[1] for count in report.sample_counts]
    return df
