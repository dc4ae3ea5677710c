"""Restore benchmark summarizer.

Reads per-row restore measurements for the distributed, centralized and
conventional solutions, aggregates them per experiment and renders the
mean restore duration and mean memory footprint as bar charts.
"""

__version__ = "0.1.0"
