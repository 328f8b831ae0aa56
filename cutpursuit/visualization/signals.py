"""Signal and image visualization helpers."""

from __future__ import annotations

from typing import Any

import matplotlib.pyplot as plt
import numpy as np


def plot_signal(
    observation: Any,
    solution: Any,
    ground_truth: Any | None = None,
    show: bool = True,
    save_path: str | None = None,
) -> None:
    """Plot a path-graph observation against the piecewise-constant solution."""
    x = np.arange(len(solution))
    plt.plot(x, np.asarray(observation), ".", color="#bfbfbf", label="Observation")
    if ground_truth is not None:
        plt.step(x, np.asarray(ground_truth), where="mid", color="#00274c", label="Ground truth")
    plt.step(x, np.asarray(solution), where="mid", color="#ffcb05", label="Cut-pursuit")
    plt.xlabel("Vertex")
    plt.ylabel("Value")
    plt.legend(frameon=True)
    if save_path:
        plt.savefig(save_path, bbox_inches="tight")
    if show:
        plt.show()
    plt.close()


def visualize_grid_solution(
    solution: Any,
    shape: tuple[int, int],
    observation: Any | None = None,
    cmap: str = "viridis",
    show: bool = True,
    save_path: str | None = None,
) -> None:
    """Display a grid solution (and optionally its observation) as images."""
    panels = [("Cut-pursuit", solution)]
    if observation is not None:
        panels.insert(0, ("Observation", observation))
    fig, axes = plt.subplots(1, len(panels), squeeze=False)
    for ax, (title, values) in zip(axes[0], panels):
        image = ax.imshow(np.asarray(values).reshape(shape), interpolation="nearest", cmap=cmap)
        ax.set_title(title)
        ax.axis("off")
        fig.colorbar(image, ax=ax)
    if save_path:
        fig.savefig(save_path, bbox_inches="tight")
    if show:
        plt.show()
    plt.close(fig)
