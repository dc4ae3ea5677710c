"""Exceptions raised by the restorebench pipeline."""


class RestoreBenchError(Exception):
    """Base class for every failure that aborts a run."""


class ConfigError(RestoreBenchError):
    """The configuration file is missing or not valid YAML."""


class ExperimentInputError(RestoreBenchError):
    """The experiments CSV could not be read."""


class MalformedRowError(ExperimentInputError):
    """A data row does not carry the fixed column layout."""

    def __init__(self, line: int, field_count: int, required: int, source=None):
        self.line = line
        self.field_count = field_count
        self.required = required
        where = f" in {source}" if source is not None else ""
        super().__init__(
            f"Malformed CSV{where}: row {line} has {field_count} fields, {required} required"
        )


class ChartRenderError(RestoreBenchError):
    """A chart could not be written to the output directory."""


class MalformedFieldError(RestoreBenchError, ValueError):
    """A numeric column holds a value that is not a number (strict mode only)."""

    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        super().__init__(f"Field '{field}' is not numeric: {value!r}")


class UnknownSolutionError(RestoreBenchError, KeyError):
    """A row references a solution outside the known set."""

    def __init__(self, name: str, known: list):
        self.name = name
        self.known = known
        super().__init__(name)

    def __str__(self) -> str:
        return f"Unknown solution '{self.name}'. Known solutions: {', '.join(self.known)}"


class StoreFinalizedError(RestoreBenchError):
    """A row was ingested after its solution was finalized."""


class NotFinalizedError(RestoreBenchError):
    """A report was requested before every solution was finalized."""
