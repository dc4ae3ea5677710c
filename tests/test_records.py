"""Tests for CSV reading and row parsing."""

import pytest

from restorebench.errors import (
    ExperimentInputError,
    MalformedFieldError,
    MalformedRowError,
)
from restorebench.records import (
    DURATION_TAG,
    MeasurementRow,
    SampleKind,
    parse_row,
    parse_rows,
    read_experiments,
)

from conftest import HEADER, make_row


class TestParseRow:
    """Classification and field extraction of a single row."""

    def test_duration_row_reads_duration_column(self):
        row = parse_row(make_row("distributed", 3, DURATION_TAG, duration="12.5", rss="4096"))
        assert row.kind is SampleKind.DURATION
        assert row.solution_name == "distributed"
        assert row.experiment_index == 3
        assert row.duration_seconds == 12.5
        assert row.memory_reading_kib == 0.0
        assert row.coerced_fields == ()

    def test_footprint_row_reads_rss_column(self):
        """VmRSS is used, not VmPeak, VmSize or VmHWM."""
        row = parse_row(make_row("centralized", 2, "smoc1", duration="3.0", rss="20164"))
        assert row.kind is SampleKind.FOOTPRINT
        assert row.memory_reading_kib == 20164.0
        assert row.duration_seconds == 0.0

    @pytest.mark.parametrize("tag", ["smoc1", "smoc4", "smoc6", "SMOC5", ""])
    def test_every_other_tag_is_footprint(self, tag):
        row = parse_row(make_row("distributed", 1, tag, rss="10"))
        assert row.kind is SampleKind.FOOTPRINT

    def test_non_numeric_experiment_coerced_to_zero(self):
        row = parse_row(make_row("distributed", "one", "smoc1", rss="10"), line=7)
        assert row.experiment_index == 0
        assert row.coerced_fields == ("Experiment",)

    def test_decimal_experiment_is_malformed(self):
        row = parse_row(make_row("distributed", "3.0", "smoc1", rss="10"))
        assert row.experiment_index == 0
        assert "Experiment" in row.coerced_fields

    def test_non_numeric_duration_coerced_to_zero(self):
        row = parse_row(make_row("distributed", 1, DURATION_TAG, duration="n/a"))
        assert row.duration_seconds == 0.0
        assert row.coerced_fields == ("RestoreDurationInSec",)

    def test_non_numeric_rss_coerced_to_zero(self):
        row = parse_row(make_row("distributed", 1, "smoc2", rss=""))
        assert row.memory_reading_kib == 0.0
        assert row.coerced_fields == ("VmRSS",)

    @pytest.mark.parametrize("value", ["1_000", " 500", "500 ", "0x10", "１２", "5e", "--1"])
    def test_loose_float_syntax_is_malformed(self, value):
        row = parse_row(make_row("distributed", 1, "smoc1", rss=value))
        assert row.memory_reading_kib == 0.0
        assert row.coerced_fields == ("VmRSS",)

    @pytest.mark.parametrize("value, expected", [
        ("20164", 20164.0), ("-1.5", -1.5), ("+.5", 0.5), ("5.", 5.0), ("1e3", 1000.0), ("2.5E-1", 0.25),
    ])
    def test_plain_float_syntax_is_accepted(self, value, expected):
        row = parse_row(make_row("distributed", 1, "smoc1", rss=value))
        assert row.memory_reading_kib == expected
        assert row.coerced_fields == ()

    @pytest.mark.parametrize("value", ["Inf", "-inf", "+Infinity", "NaN"])
    def test_special_float_values_are_numeric(self, value):
        row = parse_row(make_row("distributed", 1, DURATION_TAG, duration=value))
        assert row.coerced_fields == ()

    def test_non_ascii_experiment_digits_are_malformed(self):
        row = parse_row(make_row("distributed", "３", "smoc1", rss="1"))
        assert row.experiment_index == 0
        assert row.coerced_fields == ("Experiment",)

    def test_strict_mode_rejects_underscored_number(self):
        with pytest.raises(MalformedFieldError):
            parse_row(make_row("distributed", 1, "smoc1", rss="1_000"), strict=True)

    def test_unused_column_is_not_validated(self):
        """A bad RSS value on a duration row is never looked at."""
        row = parse_row(make_row("distributed", 1, DURATION_TAG, duration="4", rss="bad"))
        assert row.coerced_fields == ()

    def test_strict_mode_raises_on_bad_number(self):
        with pytest.raises(MalformedFieldError) as exc_info:
            parse_row(make_row("distributed", 1, DURATION_TAG, duration="abc"), strict=True)
        assert exc_info.value.field == "RestoreDurationInSec"
        assert exc_info.value.value == "abc"

    def test_strict_mode_raises_on_bad_experiment(self):
        with pytest.raises(MalformedFieldError):
            parse_row(make_row("distributed", "x", "smoc1", rss="1"), strict=True)

    def test_strict_mode_accepts_valid_row(self):
        row = parse_row(make_row("conventional", 4, "smoc3", rss="512"), strict=True)
        assert row == MeasurementRow("conventional", 4, "smoc3", memory_reading_kib=512.0)

    def test_short_row_raises(self):
        with pytest.raises(MalformedRowError) as exc_info:
            parse_row(["rs0", "distributed", "1", "smoc1", "2.0"], line=3)
        assert exc_info.value.line == 3
        assert exc_info.value.field_count == 5


class TestParseRows:
    def test_header_is_skipped(self):
        rows = [HEADER, make_row("distributed", 1, "smoc1", rss="10")]
        parsed = list(parse_rows(rows))
        assert len(parsed) == 1
        assert parsed[0].memory_reading_kib == 10.0

    def test_first_row_skipped_even_when_it_looks_like_data(self):
        rows = [
            make_row("distributed", 1, DURATION_TAG, duration="999"),
            make_row("distributed", 1, DURATION_TAG, duration="5"),
        ]
        parsed = list(parse_rows(rows))
        assert [r.duration_seconds for r in parsed] == [5.0]

    def test_first_row_skipped_even_when_malformed(self):
        assert list(parse_rows([["garbage"]])) == []

    def test_empty_input(self):
        assert list(parse_rows([])) == []


class TestReadExperiments:
    def test_reads_all_rows_as_text(self, write_csv):
        path = write_csv([HEADER, make_row("distributed", 1, "smoc1", rss="20164")])
        rows = read_experiments(path)
        assert rows[0] == HEADER
        assert rows[1][8] == "20164"
        assert rows[1][2] == "1"

    def test_empty_cells_stay_empty_strings(self, write_csv):
        path = write_csv([HEADER, make_row("distributed", 1, "smoc1", rss="")])
        rows = read_experiments(path)
        assert rows[1][8] == ""

    def test_missing_file(self, tmp_path):
        with pytest.raises(ExperimentInputError, match="not found"):
            read_experiments(tmp_path / "missing.csv")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ExperimentInputError, match="empty"):
            read_experiments(path)

    def test_truncated_row_is_fatal(self, write_csv):
        """A short row must not turn into an empty VmRSS coerced to 0."""
        path = write_csv([
            HEADER,
            make_row("distributed", 1, "smoc1", rss="500"),
            make_row("distributed", 1, "smoc2", rss="600")[:6],
        ])
        with pytest.raises(MalformedRowError) as exc_info:
            read_experiments(path)
        assert exc_info.value.line == 3
        assert exc_info.value.field_count == 6
        assert exc_info.value.required == 11
        assert "Malformed CSV" in str(exc_info.value)

    def test_trailing_empty_fields_are_not_truncation(self, write_csv):
        path = write_csv([HEADER, make_row("distributed", 1, "smoc5", duration="4")[:9] + ["", ""]])
        rows = read_experiments(path)
        assert len(rows[1]) == 11
        assert rows[1][9:] == ["", ""]

    def test_blank_lines_are_ignored(self, tmp_path):
        path = tmp_path / "blank.csv"
        path.write_text(",".join(HEADER) + "\n\n" + ",".join(make_row("distributed", 1, "smoc1", rss="7")) + "\n", encoding="utf-8")
        rows = read_experiments(path)
        assert len(rows) == 2
        assert rows[1][8] == "7"

    def test_row_with_extra_fields_is_fatal(self, write_csv):
        path = write_csv([HEADER, make_row("distributed", 1, "smoc1") + ["extra"]])
        with pytest.raises(ExperimentInputError, match="Malformed CSV"):
            read_experiments(path)

    def test_invalid_utf8_is_fatal(self, tmp_path):
        path = tmp_path / "latin1.csv"
        path.write_bytes(",".join(HEADER).encode() + b"\nrs0,distributed,1,smoc1,0,\xff\xfe,0,0,1,0,0\n")
        with pytest.raises(ExperimentInputError):
            read_experiments(path)
