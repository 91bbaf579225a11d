"""Shared types, errors, and validation for sample size calculations."""

from __future__ import annotations

import dataclasses
import enum
import math
from dataclasses import dataclass


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class SampleSizeError(ValueError):
    """Base class for sample size calculation failures."""


class InvalidProbability(SampleSizeError):
    """alpha, beta, or a quantile argument lies outside (0, 1)."""


class DegenerateInput(SampleSizeError):
    """The formula denominator is zero, so the sample size is unbounded."""


class InvalidSweepRange(SampleSizeError):
    """Sweep bounds are not finite, step <= 0, or stop < start."""


# ---------------------------------------------------------------------------
# Test selection
# ---------------------------------------------------------------------------

class TestFamily(str, enum.Enum):
    """What is being compared between the two groups."""

    __test__ = False  # keep pytest from collecting this as a test class

    MEAN = "mean"
    PROPORTION = "proportion"


class TestKind(str, enum.Enum):
    """Hypothesis formulation.

    Non-inferiority and superiority share one formula: non-inferiority
    passes a negative margin, superiority a positive one.
    """

    __test__ = False

    EQUALITY = "equality"
    NONINFERIORITY_SUPERIORITY = "noninferiority_superiority"
    EQUIVALENCE = "equivalence"


_FAMILY_ALIASES = {
    "mean": TestFamily.MEAN,
    "means": TestFamily.MEAN,
    "proportion": TestFamily.PROPORTION,
    "proportions": TestFamily.PROPORTION,
    "prop": TestFamily.PROPORTION,
}

_KIND_ALIASES = {
    "equality": TestKind.EQUALITY,
    "noninferiority_superiority": TestKind.NONINFERIORITY_SUPERIORITY,
    "noninferiority": TestKind.NONINFERIORITY_SUPERIORITY,
    "superiority": TestKind.NONINFERIORITY_SUPERIORITY,
    "non_inferiority": TestKind.NONINFERIORITY_SUPERIORITY,
    "noninf": TestKind.NONINFERIORITY_SUPERIORITY,
    "sup": TestKind.NONINFERIORITY_SUPERIORITY,
    "equivalence": TestKind.EQUIVALENCE,
    "equiv": TestKind.EQUIVALENCE,
}

_KIND_LABELS = {
    TestKind.EQUALITY: "equality",
    TestKind.NONINFERIORITY_SUPERIORITY: "non-inferiority / superiority",
    TestKind.EQUIVALENCE: "equivalence",
}

_FAMILY_LABELS = {
    TestFamily.MEAN: "means",
    TestFamily.PROPORTION: "proportions",
}


def _parse_family(family: TestFamily | str) -> TestFamily:
    if isinstance(family, TestFamily):
        return family
    key = str(family).strip().lower().replace("-", "_")
    if key not in _FAMILY_ALIASES:
        raise ValueError(
            f"family must be one of {tuple(f.value for f in TestFamily)}, got {family!r}"
        )
    return _FAMILY_ALIASES[key]


def _parse_kind(kind: TestKind | str) -> TestKind:
    if isinstance(kind, TestKind):
        return kind
    key = str(kind).strip().lower().replace("-", "_").replace("/", "_")
    if key not in _KIND_ALIASES:
        raise ValueError(
            f"kind must be one of {tuple(k.value for k in TestKind)}, got {kind!r}"
        )
    return _KIND_ALIASES[key]


@dataclass(frozen=True)
class TestSpec:
    """Which formula applies: family (means / proportions) x kind.

    Strings are accepted for either field and normalised to the enums,
    e.g. ``TestSpec("mean", "superiority")``.
    """

    __test__ = False

    family: TestFamily
    kind: TestKind

    def __post_init__(self) -> None:
        object.__setattr__(self, "family", _parse_family(self.family))
        object.__setattr__(self, "kind", _parse_kind(self.kind))

    @property
    def label(self) -> str:
        """Display title, e.g. ``'Two-sample equality test of means'``."""
        return (
            f"Two-sample {_KIND_LABELS[self.kind]} test of "
            f"{_FAMILY_LABELS[self.family]}"
        )


@dataclass(frozen=True)
class TestInputs:
    """Statistical inputs for one evaluation.

    ``group_a`` / ``group_b`` are means (family ``mean``) or proportions
    (family ``proportion``).  ``kappa`` is the sampling ratio nB / nA.
    ``margin`` is the non-inferiority (< 0), superiority (> 0), or
    equivalence (> 0) margin; it is ignored for equality tests.
    """

    __test__ = False

    group_a: float
    group_b: float
    sd: float | None = None
    kappa: float = 1.0
    alpha: float = 0.05
    beta: float = 0.20
    margin: float = 0.0

    def with_value(self, field: str, value: float) -> TestInputs:
        """Copy with one field replaced."""
        if field not in SWEEPABLE_FIELDS:
            raise ValueError(
                f"field must be one of {SWEEPABLE_FIELDS}, got {field!r}"
            )
        return dataclasses.replace(self, **{field: value})


SWEEPABLE_FIELDS = tuple(f.name for f in dataclasses.fields(TestInputs))


@dataclass(frozen=True)
class SampleSizeResult:
    """Result of a single sample size calculation.

    ``n`` is the group A size produced by the formula; group B gets
    ``n_b = ceil(kappa * n)``.
    """

    n: int
    n_b: int
    raw_n: float
    spec: TestSpec
    inputs: TestInputs
    method: str
    note: str = ""

    @property
    def total(self) -> int:
        return self.n + self.n_b

    @property
    def power(self) -> float:
        """Target power, 1 - beta."""
        return 1.0 - self.inputs.beta

    def summary(self) -> str:
        """Human-readable summary, similar to R's print.power.htest."""
        inp = self.inputs
        lines = [self.method, ""]
        lines.append(f"            n A = {self.n}")
        lines.append(f"            n B = {self.n_b}")
        lines.append(f"        group A = {inp.group_a}")
        lines.append(f"        group B = {inp.group_b}")
        if inp.sd is not None:
            lines.append(f"             sd = {inp.sd}")
        if self.spec.kind is not TestKind.EQUALITY:
            lines.append(f"         margin = {inp.margin}")
        lines.append(f"          kappa = {inp.kappa}")
        lines.append(f"          alpha = {inp.alpha}")
        lines.append(f"          power = {self.power:.6f}")
        if self.note:
            lines.append("")
            lines.append(f"NOTE: {self.note}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Shared validation
# ---------------------------------------------------------------------------

def _check_inputs(
    spec: TestSpec,
    inputs: TestInputs,
    *,
    skip: str | None = None,
) -> None:
    """Validate *inputs*, leaving out the field named by *skip*.

    A sweep passes its swept field as *skip* so that only the inputs held
    fixed are checked up front; each swept value is checked when its
    point is evaluated.

    Rules
    -----
    - *alpha* and *beta* must be in (0, 1).
    - *kappa* must be finite and > 0.
    - For means, *sd* must be given, finite and > 0.
    - *group_a*, *group_b*, *margin* must be finite.

    Proportions are not clamped to (0, 1); callers own that.

    Raises
    ------
    InvalidProbability
        If alpha or beta is outside (0, 1).
    ValueError
        On any other validation failure.
    """
    if skip != "alpha" and not (0.0 < inputs.alpha < 1.0):
        raise InvalidProbability(f"alpha must be in (0, 1), got {inputs.alpha}")
    if skip != "beta" and not (0.0 < inputs.beta < 1.0):
        raise InvalidProbability(f"beta must be in (0, 1), got {inputs.beta}")

    if skip != "kappa" and not (math.isfinite(inputs.kappa) and inputs.kappa > 0):
        raise ValueError(f"kappa must be > 0, got {inputs.kappa}")

    if spec.family is TestFamily.MEAN and skip != "sd":
        if inputs.sd is None:
            raise ValueError("sd is always required for tests of means")
        if not (math.isfinite(inputs.sd) and inputs.sd > 0):
            raise ValueError(f"sd must be > 0, got {inputs.sd}")

    for name in ("group_a", "group_b", "margin"):
        if name == skip:
            continue
        value = getattr(inputs, name)
        if not math.isfinite(value):
            raise ValueError(f"{name} must be finite, got {value}")
