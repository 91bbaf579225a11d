"""Standard normal quantile with domain checking.

Validates against: R stats::qnorm()
"""

from __future__ import annotations

import math

from scipy.stats import norm

from pytrialsize.samplesize._common import InvalidProbability


def z_quantile(p: float) -> float:
    """Return z such that Phi(z) = p.

    Parameters
    ----------
    p : float
        Probability, strictly inside (0, 1).

    Returns
    -------
    float

    Raises
    ------
    InvalidProbability
        If *p* is not a finite value in (0, 1).  ``norm.ppf`` would
        otherwise return +/-inf or NaN.

    Examples
    --------
    >>> round(z_quantile(0.975), 6)
    1.959964
    """
    if not (math.isfinite(p) and 0.0 < p < 1.0):
        raise InvalidProbability(f"quantile probability must be in (0, 1), got {p}")
    return float(norm.ppf(p))
