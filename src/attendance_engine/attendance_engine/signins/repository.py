from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .model import Teacher, TeacherSignIn


class SignInRepository(Protocol):
    def list_between(self, *, start: datetime, end: datetime) -> Sequence[TeacherSignIn]:
        """Sign-ins whose timestamp lies in [start, end] (both inclusive), oldest first."""

        raise NotImplementedError


class TeacherRepository(Protocol):
    def list_all(self) -> Sequence[Teacher]:
        raise NotImplementedError
