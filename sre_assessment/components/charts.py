from __future__ import annotations
from typing import Dict, List, Optional
import math

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from sre_assessment.core.scoring import MATURITY_LEVELS, MaturityLevel, UNKNOWN_LEVEL  # noqa: E402

# tailwind 600 shades, one per maturity color tag
LEVEL_COLORS: Dict[str, str] = {
    "red": "#dc2626",
    "orange": "#ea580c",
    "yellow": "#ca8a04",
    "green": "#16a34a",
    "blue": "#2563eb",
    "gray": "#6b7280",
}


def level_color(level: MaturityLevel) -> str:
    return LEVEL_COLORS.get(level.color_tag, LEVEL_COLORS["gray"])


def radar_chart(panel_titles: List[str], panel_scores: List[int], level: Optional[MaturityLevel] = None):
    """Panel scores on a 0-100 polar grid.

    The outline and fill take the color of ``level`` (the overall maturity
    level); dashed rings mark where each level starts.
    """
    if len(panel_titles) != len(panel_scores):
        raise ValueError("titles and scores must match length")
    if not panel_titles:
        raise ValueError("at least one panel is required")
    color = level_color(level or UNKNOWN_LEVEL)

    n = len(panel_titles)
    angles = [i / float(n) * 2 * math.pi for i in range(n)]
    values = list(panel_scores)
    # close the polygon
    angles.append(angles[0])
    values.append(values[0])

    fig = plt.figure(figsize=(6, 6))
    ax = fig.add_subplot(111, polar=True)
    ax.set_theta_offset(math.pi / 2)
    ax.set_theta_direction(-1)
    ax.set_thetagrids([a * 180 / math.pi for a in angles[:-1]], panel_titles)
    ax.set_ylim(0, 100)

    ring = [a * 2 * math.pi / 120 for a in range(121)]
    for low, _, _, tag in MATURITY_LEVELS[1:]:
        ax.plot(ring, [low] * len(ring), linestyle="--", linewidth=0.8, color=LEVEL_COLORS[tag], alpha=0.6)

    ax.plot(angles, values, linewidth=2, color=color)
    ax.fill(angles, values, color=color, alpha=0.25)
    ax.grid(True)
    if level is not None:
        ax.set_title(level.level, color=color, fontweight="bold")
    return fig
