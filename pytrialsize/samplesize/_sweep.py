"""Sample sizes over a range of one input (usually group A's value).

Each point is an independent call to :func:`compute_sample_size`.  A point
whose formula degenerates (zero denominator) is marked failed and the
sweep carries on; problems with the range itself or with inputs held
fixed across the sweep are raised before anything is evaluated.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from pytrialsize.samplesize._common import (
    DegenerateInput,
    InvalidProbability,
    InvalidSweepRange,
    SWEEPABLE_FIELDS,
    TestInputs,
    TestSpec,
    _check_inputs,
)
from pytrialsize.samplesize._formulas import compute_sample_size

logger = logging.getLogger(__name__)

# Fraction of a step by which the last value may overshoot ``stop``.
_STOP_TOL = 1e-9
_DECIMALS = 12
_MAX_POINTS = 1_000_000

_FIELD_LABELS = {
    "group_a": "group A",
    "group_b": "group B",
    "sd": "standard deviation",
    "kappa": "sampling ratio (kappa)",
    "alpha": "type-1 error (alpha)",
    "beta": "type-2 error (beta)",
    "margin": "margin (delta)",
}


@dataclass(frozen=True)
class SweepResult:
    """Sample sizes across a sweep, in sweep order.

    ``n[i]`` is 0 wherever ``failed[i]`` is True; ``errors[i]`` then holds
    the reason.
    """

    field: str
    values: NDArray[np.floating]  # shape (n_points,), strictly increasing
    n: NDArray[np.integer]  # group A sample size per point
    failed: NDArray[np.bool_]
    errors: tuple[str | None, ...]
    spec: TestSpec
    inputs: TestInputs  # base inputs; ``field`` is overwritten per point

    def __len__(self) -> int:
        return int(self.values.shape[0])

    @property
    def n_failed(self) -> int:
        return int(self.failed.sum())

    @property
    def axis_label(self) -> str:
        """Name of the swept quantity, for tables and plot axes."""
        return _FIELD_LABELS.get(self.field, self.field)

    def rows(self) -> Iterator[tuple[float, int | None]]:
        """Yield ``(value, n)`` pairs; ``n`` is None for failed points."""
        for value, n, failed in zip(self.values, self.n, self.failed):
            yield float(value), (None if failed else int(n))

    def summary(self) -> str:
        """Two-column text table of the sweep."""
        lines = [self.spec.label, ""]
        header = f"{self.axis_label:>24s}  {'n per arm':>10s}"
        lines.append(header)
        lines.append("-" * len(header))
        for value, n in self.rows():
            cell = "failed" if n is None else str(n)
            lines.append(f"{value:>24.6g}  {cell:>10s}")
        if self.n_failed:
            lines.append("")
            lines.append(f"NOTE: {self.n_failed} of {len(self)} points failed")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Range construction
# ---------------------------------------------------------------------------

def sweep_values(start: float, stop: float, step: float) -> NDArray[np.floating]:
    """Values ``start, start + step, ...`` up to and including ``stop``.

    ``stop`` is included when it lies on the grid up to floating-point
    error.  Values are computed as ``start + i * step`` and rounded to 12
    decimals, so there is no accumulated drift.

    Raises
    ------
    InvalidSweepRange
        If a bound is not finite, ``step <= 0``, ``stop < start``, or the
        range holds more than 1,000,000 points.

    Examples
    --------
    >>> sweep_values(1.0, 2.0, 0.25).tolist()
    [1.0, 1.25, 1.5, 1.75, 2.0]
    """
    for name, value in (("start", start), ("stop", stop), ("step", step)):
        if not math.isfinite(value):
            raise InvalidSweepRange(f"{name} must be finite, got {value}")
    if step <= 0:
        raise InvalidSweepRange(f"step must be > 0, got {step}")
    if stop < start:
        raise InvalidSweepRange(f"stop must be >= start, got start={start}, stop={stop}")

    span = (stop - start) / step
    if not math.isfinite(span) or span >= _MAX_POINTS:
        raise InvalidSweepRange(
            f"range {start} to {stop} by {step} exceeds {_MAX_POINTS} points"
        )
    count = math.floor(span + _STOP_TOL) + 1
    values = np.round(start + step * np.arange(count, dtype=np.float64), _DECIMALS)

    if count > 1 and not np.all(np.diff(values) > 0):
        raise InvalidSweepRange(f"step {step} is too small to resolve at {_DECIMALS} decimals")
    return values


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def sweep(
    spec: TestSpec,
    inputs: TestInputs,
    start: float,
    stop: float,
    step: float,
    *,
    field: str = "group_a",
) -> SweepResult:
    """Compute the sample size at every point of a sweep over one input.

    Parameters
    ----------
    spec : TestSpec
        Family and kind of the test.
    inputs : TestInputs
        Base inputs.  ``field`` is overwritten at each point; everything
        else is held fixed.
    start, stop, step : float
        Sweep range, inclusive of both ends, ``step > 0``.
    field : str
        Which ``TestInputs`` field to sweep (default ``'group_a'``).

    Returns
    -------
    SweepResult

    Raises
    ------
    InvalidSweepRange
        If the range is invalid.
    InvalidProbability, ValueError
        If an input held fixed across the sweep is invalid.

    Notes
    -----
    ``DegenerateInput`` and ``InvalidProbability`` raised at an individual
    point are recorded in ``failed`` / ``errors`` rather than propagated,
    so a range crossing ``group_a == group_b`` still yields every other
    point.
    """
    if field not in SWEEPABLE_FIELDS:
        raise ValueError(f"field must be one of {SWEEPABLE_FIELDS}, got {field!r}")

    values = sweep_values(start, stop, step)
    _check_inputs(spec, inputs, skip=field)

    M = values.shape[0]
    n_arr = np.zeros(M, dtype=np.int64)
    failed = np.zeros(M, dtype=bool)
    errors: list[str | None] = [None] * M

    for i in range(M):
        value = float(values[i])
        try:
            n_arr[i] = compute_sample_size(spec, inputs.with_value(field, value))
        except (DegenerateInput, InvalidProbability) as exc:
            failed[i] = True
            errors[i] = str(exc)
            logger.debug("sweep point %s=%r failed: %s", field, value, exc)

    logger.debug(
        "%s: swept %s over %d points (%d failed)",
        spec.label, field, M, int(failed.sum()),
    )

    return SweepResult(
        field=field,
        values=values,
        n=n_arr,
        failed=failed,
        errors=tuple(errors),
        spec=spec,
        inputs=inputs,
    )
