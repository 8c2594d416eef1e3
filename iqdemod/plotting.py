from typing import Any, Optional, Sequence, Tuple

import matplotlib as mpl
import matplotlib.pyplot as plt
import numpy as np


def apply_default_theme() -> None:
    mpl.rcParams.update(
        {
            "figure.figsize": (5, 3.5),
            "font.size": 12,
            "lines.linewidth": 2,
            "axes.linewidth": 1,
            "axes.grid": True,
            "axes.titleweight": "bold",
            "figure.autolayout": True,
            "figure.facecolor": "white",
            "savefig.facecolor": "white",
            "savefig.dpi": 300,
            "xtick.direction": "in",
            "ytick.direction": "in",
            "xtick.top": True,
            "ytick.right": True,
        }
    )


def constellation(
    symbols: Sequence[complex],
    ax: Optional[Any] = None,
    title: Optional[str] = "Recovered Symbols",
    show: bool = False,
    **kwargs: Any,
) -> Optional[Tuple[Any, Any]]:
    """
    Scatter plot of symbol-rate samples on the I/Q plane.

    Args:
        symbols: Complex symbols, e.g. `Receiver.symbols`.
        ax: Optional matplotlib axis to plot on.
        title: Title of the plot. If None, no title is set.
        show: Whether to call plt.show() after plotting.
        **kwargs: Additional arguments passed to ax.scatter.

    Returns:
        Tuple of (figure, axis) if show is False, else None.
    """
    if ax is None:
        fig, ax = plt.subplots()
    else:
        fig = ax.figure

    symbols = np.asarray(symbols, dtype=np.complex128)
    kwargs.setdefault("s", 4)
    kwargs.setdefault("alpha", 0.5)
    ax.scatter(symbols.real, symbols.imag, **kwargs)

    ax.axhline(0, color="black", linewidth=1, zorder=0)
    ax.axvline(0, color="black", linewidth=1, zorder=0)
    limit = np.max(np.abs(symbols)) * 1.1 if symbols.size else 1.0
    ax.set_xlim(-limit, limit)
    ax.set_ylim(-limit, limit)
    ax.set_aspect("equal")
    ax.set_xlabel("In-Phase (I)")
    ax.set_ylabel("Quadrature (Q)")
    if title is not None:
        ax.set_title(title)

    if show:
        plt.show()
        return None
    return fig, ax


def loop_trace(
    values: Sequence[float],
    ax: Optional[Any] = None,
    title: Optional[str] = "Timing Error",
    ylabel: str = "Error",
    show: bool = False,
    **kwargs: Any,
) -> Optional[Tuple[Any, Any]]:
    """
    Plots a loop variable (timing error, PLL phase error) per update.

    Args:
        values: One value per loop update.
        ax: Optional matplotlib axis to plot on.
        title: Title of the plot. If None, no title is set.
        ylabel: Label of the vertical axis.
        show: Whether to call plt.show() after plotting.
        **kwargs: Additional arguments passed to ax.plot.

    Returns:
        Tuple of (figure, axis) if show is False, else None.
    """
    if ax is None:
        fig, ax = plt.subplots()
    else:
        fig = ax.figure

    values = np.asarray(values, dtype=float)
    ax.plot(np.arange(values.shape[0]), values, **kwargs)
    ax.set_xlabel("Update")
    ax.set_ylabel(ylabel)
    if title is not None:
        ax.set_title(title)

    if show:
        plt.show()
        return None
    return fig, ax
