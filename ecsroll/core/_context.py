from __future__ import annotations

from .data_model import DataModel


class Context(DataModel):
    id: str | None = None
    """Identifies one operation call, returned on its response."""
