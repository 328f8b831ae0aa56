"""Visualization helpers for partitions and piecewise-constant solutions."""

from cutpursuit.visualization.graphs import draw_partition
from cutpursuit.visualization.signals import plot_signal, visualize_grid_solution

__all__ = ["draw_partition", "plot_signal", "visualize_grid_solution"]
