from __future__ import annotations

from abc import ABC, abstractmethod
from fractions import Fraction

from ...signins.model import TeacherSignIn


class HoursCalculator(ABC):
    """Calculator interface (Strategy Pattern for teaching hours)."""

    @abstractmethod
    def hours(self, signin: TeacherSignIn) -> Fraction:
        """Exact duration in hours; raises ValueError when it cannot be computed."""

        raise NotImplementedError
