"""Scatter plot of a sweep: swept value against n per treatment arm.

matplotlib is an optional dependency (``pip install pytrialsize[plot]``)
and is only imported when a plot is requested.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pytrialsize.samplesize._sweep import SweepResult

if TYPE_CHECKING:
    from matplotlib.axes import Axes


def plot_sweep(result: SweepResult, ax: Axes | None = None, **scatter_kwargs) -> Axes:
    """Scatter the successful points of *result*.

    Parameters
    ----------
    result : SweepResult
        Output of :func:`sweep`.
    ax : matplotlib Axes or None
        Axes to draw on; a new figure is created if None.
    **scatter_kwargs
        Passed through to ``Axes.scatter``.

    Returns
    -------
    matplotlib.axes.Axes
    """
    import matplotlib.pyplot as plt

    if ax is None:
        _, ax = plt.subplots()

    ok = ~result.failed
    ax.scatter(result.values[ok], result.n[ok], **scatter_kwargs)
    ax.set_title(result.spec.label)
    ax.set_xlabel(result.axis_label)
    ax.set_ylabel("n per treatment arm")
    return ax
