from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Person:
    """Domain entity: a worker who records marks.

    Owned by the HR collaborator; read-only here.
    """

    person_id: str
    full_name: str
    role: Role
    active: bool = True
    assigned_site_id: Optional[str] = None

    @property
    def can_check_in(self) -> bool:
        # Promoters record presence through their own workflow.
        return self.role != Role.PROMOTER
