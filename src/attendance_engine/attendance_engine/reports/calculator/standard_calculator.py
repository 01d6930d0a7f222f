from __future__ import annotations

from decimal import Decimal
from fractions import Fraction

from ...common.datetime_utils import minutes_between
from ...signins.model import TeacherSignIn
from .base import HoursCalculator


class StoredOrDerivedHoursCalculator(HoursCalculator):
    """Standard rule: stored hours when present, else (end - start) / 60, not below 0.

    Values are kept as exact fractions so per-teacher totals equal the sum
    of their class/subject buckets exactly.
    """

    def hours(self, signin: TeacherSignIn) -> Fraction:
        if signin.hours is not None:
            value = signin.hours
            if isinstance(value, float):
                value = Decimal(repr(value))
            return max(Fraction(value), Fraction(0))
        return Fraction(minutes_between(signin.start, signin.end), 60)
