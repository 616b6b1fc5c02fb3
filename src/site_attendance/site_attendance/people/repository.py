from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .model import Person


class PersonRepository(Protocol):
    """Repository interface for Person.

    Note (DIP): services depend on this protocol, never on a concrete database.
    """

    def get_by_id(self, person_id: str) -> Optional[Person]:
        raise NotImplementedError

    def list_by_ids(self, person_ids: Iterable[str]) -> Sequence[Person]:
        raise NotImplementedError
