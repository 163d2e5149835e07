"""Local saved-formulation list.

Kept in memory, newest first. When a path is given the list is mirrored to a
JSON file so it survives restarts (the equivalent of browser local storage).
"""

import asyncio
import json
import uuid
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from formulab.models.formulation import Formulation, SavedFormulation
from formulab.utils.logger import get_logger

logger = get_logger("formulab.store")


class SavedFormulationStore:
    """Async-safe saved list with optional JSON persistence."""

    def __init__(self, store_path: str | Path | None = None):
        self._store_path = Path(store_path) if store_path else None
        self._lock = asyncio.Lock()
        self._items: list[SavedFormulation] = []
        self._load()

    def _load(self) -> None:
        """Load state from disk. No-op if file missing or invalid."""
        if self._store_path is None or not self._store_path.exists():
            return
        try:
            data = json.loads(self._store_path.read_text(encoding="utf-8"))
            items = data.get("formulations", []) if isinstance(data, dict) else None
            if not isinstance(items, list):
                logger.warning(
                    "saved_store.load_error",
                    path=str(self._store_path),
                    error=f"expected an object with a 'formulations' list, got {type(data).__name__}",
                )
                return
            self._items = [SavedFormulation.model_validate(item) for item in items]
        except (OSError, ValueError, ValidationError) as e:
            logger.warning(
                "saved_store.load_error",
                path=str(self._store_path),
                error=str(e),
            )

    def _save(self) -> None:
        """Write state to disk. Caller should hold _lock."""
        if self._store_path is None:
            return
        try:
            self._store_path.parent.mkdir(parents=True, exist_ok=True)
            data = {"formulations": [item.model_dump(mode="json", by_alias=True) for item in self._items]}
            self._store_path.write_text(
                json.dumps(data, indent=2, ensure_ascii=False),
                encoding="utf-8",
            )
        except OSError as e:
            logger.error(
                "saved_store.save_error",
                path=str(self._store_path),
                error=str(e),
            )

    async def add(self, formulation: Formulation) -> SavedFormulation:
        """Save a formulation and return its saved entry."""
        entry = SavedFormulation(
            id=uuid.uuid4().hex,
            created_at=datetime.now(timezone.utc),
            output=formulation,
        )
        async with self._lock:
            self._items.insert(0, entry)
            self._save()
        logger.info("saved_store.added", formulation_id=entry.id, product_name=formulation.product_name)
        return entry

    async def list_all(self) -> list[SavedFormulation]:
        async with self._lock:
            return list(self._items)

    async def get(self, formulation_id: str) -> SavedFormulation | None:
        async with self._lock:
            return next((item for item in self._items if item.id == formulation_id), None)

    async def delete(self, formulation_id: str) -> bool:
        """Remove an entry. Returns False if the id is unknown."""
        async with self._lock:
            before = len(self._items)
            self._items = [item for item in self._items if item.id != formulation_id]
            removed = len(self._items) != before
            if removed:
                self._save()
        if removed:
            logger.info("saved_store.deleted", formulation_id=formulation_id)
        return removed
