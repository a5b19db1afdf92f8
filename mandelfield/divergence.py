"""Escape-time iteration for single samples of the complex plane."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

ITERMAX = 100


@dataclass(frozen=True)
class FiniteDifferenceBailout:
    """Stop iterating once an orbit has visibly settled.

    The policy watches the first and second finite differences of the orbit,
    ``d1 = z[n+1] - z[n]`` and ``d2 = d1[n] - d1[n-1]``. When both fall below
    ``tolerance`` the orbit has reached a fixed point and the sample is bounded,
    so iteration can end at the cap. With ``enabled=False`` the differences are
    still computed for every step but never end the loop.
    """

    tolerance: float = 1e-12
    enabled: bool = False

    @staticmethod
    def differences(previous: complex, current: complex, following: complex) -> tuple[complex, complex]:
        delta1 = following - current
        delta2 = delta1 - (current - previous)
        return delta1, delta2

    def should_exit(self, delta1: complex, delta2: complex) -> bool:
        if not self.enabled:
            return False
        return abs(delta1) < self.tolerance and abs(delta2) < self.tolerance


def diverge(
    c: complex,
    threshold: float,
    itermax: int = ITERMAX,
    bailout: Optional[FiniteDifferenceBailout] = None,
) -> int:
    """Count iterations of ``z = z*z + c`` until ``|z|`` reaches ``threshold``.

    The orbit starts at ``z = c``. The result lies in ``[0, itermax]``; points
    that never escape return ``itermax``.
    """

    count = 0
    z = c

    if bailout is None:
        while abs(z) < threshold and count < itermax:
            z = z * z + c
            count += 1
        return count

    previous: Optional[complex] = None
    while abs(z) < threshold and count < itermax:
        following = z * z + c
        count += 1
        if previous is not None:
            delta1, delta2 = bailout.differences(previous, z, following)
            if bailout.should_exit(delta1, delta2):
                return itermax
        previous, z = z, following
    return count


@dataclass(frozen=True)
class DivergenceEngine:
    """Escape-time settings shared by every sample of a render."""

    threshold: float
    itermax: int = ITERMAX
    bailout: Optional[FiniteDifferenceBailout] = None

    def __post_init__(self) -> None:
        if not self.threshold > 0:
            raise ValueError(f"threshold must be positive, got {self.threshold}")
        if self.itermax < 0:
            raise ValueError(f"itermax must be non-negative, got {self.itermax}")

    def __call__(self, c: complex) -> int:
        return diverge(c, self.threshold, self.itermax, self.bailout)
