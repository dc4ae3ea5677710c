"""Bar chart rendering of a Report."""
import logging
import math
from pathlib import Path
from typing import Any, Dict, List

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns

from restorebench.errors import ChartRenderError
from restorebench.report import Report, ReportView

logger = logging.getLogger(__name__)

CM_PER_INCH = 2.54


def _relative_bar_width(bar_width_cm: float, width_in: float, bar_count: int) -> float:
    """Converts an absolute bar width into a fraction of one category slot."""
    # Roughly 80% of the figure width is left for the axes after layout.
    slot_in = width_in * 0.8 / max(bar_count, 1)
    return min(max((bar_width_cm / CM_PER_INCH) / slot_in, 0.05), 1.0)


def render_bar_chart(view: ReportView, path: Path, chart_config: Dict[str, Any], y_label: str) -> Path:
    """Draws one vertical bar per label; a NaN or infinite mean leaves its slot empty."""
    logger.info(f"Generating bar chart for '{view.title}'...")
    undefined = [label for label, mean in view.entries() if not math.isfinite(mean)]
    if undefined:
        logger.warning(f"{view.title}: no finite mean for {', '.join(undefined)}, bar left empty.")

    labels = list(view.labels)
    width_in = chart_config['width_in']
    height_in = chart_config['height_in']

    df = pd.DataFrame({'slot': range(len(labels)), 'solution': labels, 'mean': list(view.means), 'std': list(view.std_devs)})
    df = df[np.isfinite(df['mean'])]

    plt.figure(figsize=(width_in, height_in))
    try:
        if df.empty:
            plt.xticks(range(len(labels)), labels)
            plt.xlim(-0.5, len(labels) - 0.5)
        else:
            sns.barplot(
                data=df, x='solution', y='mean',
                order=labels,
                errorbar=None,
                color=sns.color_palette()[0],
                width=_relative_bar_width(chart_config['bar_width_cm'], width_in, len(labels)),
            )
        bars = df[np.isfinite(df['std'])]
        if chart_config.get('error_bars') and not bars.empty:
            plt.errorbar(
                x=bars['slot'].tolist(), y=bars['mean'].tolist(), yerr=bars['std'].tolist(),
                fmt='none', ecolor='black', capsize=3,
            )

        plt.title(' ')
        plt.xlabel(chart_config['x_label'])
        plt.ylabel(y_label)
        plt.tight_layout()
        plt.savefig(path)
    except OSError as e:
        raise ChartRenderError(f"Can not write chart {path}: {e}") from e
    finally:
        plt.close()
    return path


def render_report(report: Report, output_dir: Path, chart_config: Dict[str, Any]) -> List[Path]:
    """Writes the restore duration and memory footprint charts into ``output_dir``."""
    output_dir = Path(output_dir)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ChartRenderError(f"Can not create output directory {output_dir}: {e}") from e

    paths = []
    for view, key in ((report.restore_duration, 'restore_duration'), (report.memory_footprint, 'memory_footprint')):
        settings = chart_config[key]
        paths.append(render_bar_chart(view, output_dir / settings['filename'], chart_config, settings['y_label']))
    return paths
