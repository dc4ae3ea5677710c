"""Shared pytest fixtures for restorebench tests."""

import matplotlib
import pytest

matplotlib.use("Agg")

HEADER = [
    "ReplicaSet", "Solution", "Experiment", "SmocId", "RestoreDurationInSec",
    "VmPeak", "VmSize", "VmHWM", "VmRSS", "VmData", "DeltaMemoryUsageInKbFromTop",
]


def make_row(solution, experiment, tag, duration="0", rss="0", replica_set="rs0"):
    """Build a full 11-column CSV row; VmPeak/VmSize/VmHWM are set apart from VmRSS."""
    return [
        replica_set, solution, str(experiment), tag, str(duration),
        "99999", "88888", "77777", str(rss), "66666", "55555",
    ]


def scenario_rows():
    """Two experiments per solution; distributed matches the documented example."""
    return [
        HEADER,
        make_row("distributed", 1, "smoc1", rss=100),
        make_row("distributed", 1, "smoc2", rss=200),
        make_row("distributed", 1, "smoc5", duration=5),
        make_row("distributed", 2, "smoc1", rss=50),
        make_row("distributed", 2, "smoc5", duration=7),
        make_row("centralized", 1, "smoc1", rss=400),
        make_row("centralized", 1, "smoc5", duration=10),
        make_row("centralized", 2, "smoc1", rss=600),
        make_row("centralized", 2, "smoc5", duration=14),
        make_row("conventional", 1, "smoc1", rss=1000),
        make_row("conventional", 1, "smoc5", duration=20),
        make_row("conventional", 2, "smoc1", rss=1000),
        make_row("conventional", 2, "smoc5", duration=20),
    ]


def _to_csv(rows):
    return "\n".join(",".join(row) for row in rows) + "\n"


@pytest.fixture
def write_csv(tmp_path):
    """Write rows to a CSV file under tmp_path and return its path."""

    def _write(rows, name="experiments.csv"):
        path = tmp_path / name
        path.write_text(_to_csv(rows), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def scenario_csv(write_csv):
    return write_csv(scenario_rows())
