from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .model import Site


class SiteRepository(Protocol):
    def get_by_id(self, site_id: str) -> Optional[Site]:
        raise NotImplementedError

    def list_by_ids(self, site_ids: Iterable[str]) -> Sequence[Site]:
        raise NotImplementedError
