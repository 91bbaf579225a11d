"""Achieved power of a two-sample design at a given group A size.

The inverse of the closed-form sample sizes in ``_formulas``: plugging the
raw n back in returns 1 - beta, and any n at or above it returns at
least that.
"""

from __future__ import annotations

import math

from scipy.stats import norm

from pytrialsize.samplesize._common import (
    TestKind,
    TestInputs,
    TestSpec,
    _check_inputs,
)
from pytrialsize.samplesize._formulas import _variance_factor
from pytrialsize.samplesize._quantile import z_quantile


def _standard_error(spec: TestSpec, inputs: TestInputs, n: float) -> float:
    """SE of the group difference with nA = n, nB = kappa * n."""
    return math.sqrt(_variance_factor(spec.family, inputs) / n)


def achieved_power(spec: TestSpec, inputs: TestInputs, n: float) -> float:
    """Normal-approximation power with *n* subjects in group A.

    Parameters
    ----------
    spec : TestSpec
        Family and kind of the test.
    inputs : TestInputs
        Same inputs as for ``compute_sample_size``; ``beta`` is not used.
    n : float
        Group A size (> 0).  Group B is ``kappa * n``.

    Returns
    -------
    float
        Power in [0, 1].

    Notes
    -----
    - equality: two-sided, ``Phi(|d|/SE - z) + Phi(-|d|/SE - z)`` with
      ``z = z(1 - alpha/2)``.
    - non-inferiority / superiority: one-sided against the margin-shifted
      null, ``Phi(|d - margin|/SE - z(1 - alpha))``.  The direction is
      carried by the sign of the margin, as in the sample size formula.
    - equivalence: TOST, ``Phi((margin - d)/SE - z) + Phi((margin + d)/SE - z) - 1``
      floored at 0, with ``z = z(1 - alpha)``.
    """
    if not (math.isfinite(n) and n > 0):
        raise ValueError(f"n must be > 0, got {n}")
    _check_inputs(spec, inputs)

    se = _standard_error(spec, inputs, float(n))
    diff = inputs.group_a - inputs.group_b

    if spec.kind is TestKind.EQUALITY:
        z_crit = z_quantile(1.0 - inputs.alpha / 2.0)
        z_effect = abs(diff) / se
        return float(norm.cdf(z_effect - z_crit) + norm.cdf(-z_effect - z_crit))

    z_crit = z_quantile(1.0 - inputs.alpha)
    if spec.kind is TestKind.NONINFERIORITY_SUPERIORITY:
        z_effect = abs(diff - inputs.margin) / se
        return float(norm.cdf(z_effect - z_crit))

    # equivalence
    pwr = (
        norm.cdf((inputs.margin - diff) / se - z_crit)
        + norm.cdf((inputs.margin + diff) / se - z_crit)
        - 1.0
    )
    return float(max(pwr, 0.0))
