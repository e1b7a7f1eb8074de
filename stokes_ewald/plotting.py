"""
Diagnostic plots for gathered fields and grid channels.
"""

from __future__ import annotations

import numpy as np
import matplotlib.pyplot as plt

from .grid import EwaldGrid


def plot_velocity_field(
    targets: np.ndarray,
    velocity: np.ndarray,
    *,
    sources: np.ndarray | None = None,
    fname: str | None = None,
    title: str | None = None,
    ax: plt.Axes | None = None,
) -> plt.Axes:
    """
    Quiver plot of a velocity evaluated at scattered targets.

    Parameters
    ----------
    targets : np.ndarray
        Target positions ``(2, Ntar)``.
    velocity : np.ndarray
        Velocity ``(2, Ntar)`` at the targets.
    sources : np.ndarray, optional
        Source positions ``(2, Nsrc)`` drawn as markers.
    fname : str, optional
        Save path for figure.
    title : str, optional
        Plot title.
    ax : matplotlib.axes.Axes, optional
        Existing axes to draw on.

    Returns
    -------
    matplotlib.axes.Axes
        Axes containing the plot.
    """
    targets = np.asarray(targets)
    velocity = np.asarray(velocity)
    if ax is None:
        fig, ax = plt.subplots(figsize=(6.0, 5.2), dpi=140)
    else:
        fig = ax.figure

    speed = np.hypot(velocity[0], velocity[1])
    q = ax.quiver(targets[0], targets[1], velocity[0], velocity[1], speed, cmap="viridis")
    fig.colorbar(q, ax=ax, label=r"$|u|$")
    if sources is not None:
        sources = np.asarray(sources)
        ax.plot(sources[0], sources[1], "k.", ms=4, label="sources")
        ax.legend(frameon=False, loc="upper right")

    ax.set_aspect("equal")
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    if title:
        ax.set_title(title)

    fig.tight_layout()
    if fname:
        fig.savefig(fname, bbox_inches="tight")
        plt.close(fig)
    else:
        plt.show()
    return ax


def plot_grid_channel(
    H: np.ndarray,
    grid: EwaldGrid,
    *,
    fname: str | None = None,
    title: str | None = None,
    ax: plt.Axes | None = None,
) -> plt.Axes:
    """Image of one ``(My, Mx)`` grid channel over the periodic box."""
    H = np.asarray(H)
    if H.shape != grid.shape:
        raise ValueError(f"channel shape {H.shape} does not match grid {grid.shape}")
    if ax is None:
        fig, ax = plt.subplots(figsize=(6.0, 5.2), dpi=140)
    else:
        fig = ax.figure

    extent = (-grid.Lx / 2, grid.Lx / 2 - grid.hx, -grid.Ly / 2, grid.Ly / 2 - grid.hy)
    im = ax.imshow(H, origin="lower", extent=extent, cmap="RdBu_r", interpolation="nearest")
    fig.colorbar(im, ax=ax)
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    if title:
        ax.set_title(title)

    fig.tight_layout()
    if fname:
        fig.savefig(fname, bbox_inches="tight")
        plt.close(fig)
    else:
        plt.show()
    return ax


__all__ = ["plot_velocity_field", "plot_grid_channel"]
