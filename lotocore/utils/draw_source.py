"""
lotocore/utils/draw_source.py
Read-only access to the draw history. The storage itself lives outside the
core; anything exposing ``list_draws`` can be passed in.
"""
from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Iterable, Protocol

from lotocore.models.game import Draw, UniverseConfig
from lotocore.utils.errors import InvalidInput
from lotocore.utils.logger import get_logger

log = get_logger("draw_source")


class DrawSource(Protocol):
    def list_draws(
        self,
        order_by: str = "asc",
        limit: int | None = None,
        sequence_range: tuple[int, int] | None = None,
    ) -> list[Draw]: ...


class InMemoryDrawSource:
    """Draw source over a list already in memory."""

    def __init__(self, draws: Iterable[Draw]):
        self._draws = sorted(draws, key=lambda d: d.sequence_number)

    def list_draws(
        self,
        order_by: str = "asc",
        limit: int | None = None,
        sequence_range: tuple[int, int] | None = None,
    ) -> list[Draw]:
        if order_by not in ("asc", "desc"):
            raise InvalidInput(f"order_by must be 'asc' or 'desc', got {order_by!r}", order_by)
        rows = self._draws
        if sequence_range is not None:
            start, end = sequence_range
            rows = [d for d in rows if start <= d.sequence_number <= end]
        if order_by == "desc":
            rows = list(reversed(rows))
        if limit is not None:
            rows = rows[:limit]
        return list(rows)


class JsonlDrawSource(InMemoryDrawSource):
    """
    History file with one JSON object per line:
    {"id": 2700, "date": "2024-03-02", "result": [4, 17, 23, 31, 45, 58]}
    """

    def __init__(self, path: str | Path, universe: UniverseConfig):
        draws: list[Draw] = []
        with open(path, "r", encoding="utf-8") as f:
            for line_no, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                data = json.loads(line)
                nums = data.get("result", [])[: universe.numbers_drawn]
                raw_date = data.get("date")
                try:
                    draws.append(Draw.create(
                        int(data["id"]),
                        date.fromisoformat(raw_date) if raw_date else None,
                        nums,
                        universe,
                    ))
                except InvalidInput as exc:
                    log.error(f"{path}:{line_no} skipped: {exc}")
        log.info(f"Loaded {len(draws)} draws from {path}")
        super().__init__(draws)


def latest_draw(source: DrawSource) -> Draw | None:
    rows = source.list_draws(order_by="desc", limit=1)
    return rows[0] if rows else None
