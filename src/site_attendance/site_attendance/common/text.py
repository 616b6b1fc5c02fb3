from __future__ import annotations

import unicodedata
from typing import Optional


def fold_text(raw: Optional[str]) -> str:
    """Lowercase, collapse whitespace and strip accents ("Líder " -> "lider")."""
    text = unicodedata.normalize("NFD", str(raw or ""))
    text = "".join(ch for ch in text if unicodedata.category(ch) != "Mn")
    return " ".join(text.lower().split())
