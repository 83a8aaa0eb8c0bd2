from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Student, StudentDay


class StudentRepository(Protocol):
    def get_by_code(self, code: str) -> Optional[Student]:
        raise NotImplementedError

    def list_with_attendance_on(self, day: date) -> Sequence[StudentDay]:
        """All students with their record for ``day`` in a single query."""

        raise NotImplementedError
