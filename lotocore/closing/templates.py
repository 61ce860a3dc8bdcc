"""
lotocore/closing/templates.py
Precomputed covering designs ("wheels"). Each template is a table of index
tuples into the player's ordered pool. The tables are static data verified
offline; this module only loads and validates them.

Naming: "<pool>-<game size>-<guaranteed hits>-<drawn numbers in pool>".
"18-15-14-15" plays 15-number games over an 18-number pool and guarantees
14 hits whenever the 15 drawn numbers all lie in the pool.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from lotocore.utils.config import get_template_table
from lotocore.utils.errors import InvalidInput


@dataclass(frozen=True)
class WheelTemplate:
    name: str
    pool_size: int
    game_size: int
    chosen_draw_size: int
    guaranteed_hits: int
    total_games: int
    index_tuples: tuple[tuple[int, ...], ...]

    @classmethod
    def from_dict(cls, record: dict[str, Any]) -> "WheelTemplate":
        template = cls(
            name=record["name"],
            pool_size=int(record["pool_size"]),
            game_size=int(record["game_size"]),
            chosen_draw_size=int(record["chosen_draw_size"]),
            guaranteed_hits=int(record["guaranteed_hits"]),
            total_games=int(record["total_games"]),
            index_tuples=tuple(tuple(int(i) for i in t) for t in record["index_tuples"]),
        )
        template.validate()
        return template

    def validate(self) -> None:
        """Structural checks only; the covering property itself is not recomputed."""
        if len(self.index_tuples) != self.total_games:
            raise InvalidInput(
                f"Template {self.name}: declares {self.total_games} games, has {len(self.index_tuples)}"
            )
        if not 0 < self.guaranteed_hits <= min(self.game_size, self.chosen_draw_size):
            raise InvalidInput(f"Template {self.name}: invalid guarantee {self.guaranteed_hits}")
        for row, indices in enumerate(self.index_tuples):
            if len(indices) != self.game_size:
                raise InvalidInput(
                    f"Template {self.name} row {row}: {len(indices)} indices, expected {self.game_size}",
                    indices,
                )
            if len(set(indices)) != len(indices):
                raise InvalidInput(f"Template {self.name} row {row}: repeated index", indices)
            if not all(0 <= i < self.pool_size for i in indices):
                raise InvalidInput(
                    f"Template {self.name} row {row}: index outside [0,{self.pool_size})", indices
                )


_templates: dict[str, WheelTemplate] = {}


def get_wheel_template(name: str) -> WheelTemplate:
    if name in _templates:
        return _templates[name]
    for record in get_template_table():
        if record["name"] == name:
            _templates[name] = WheelTemplate.from_dict(record)
            return _templates[name]
    raise ValueError(f"Unknown wheel template: {name}")


def list_wheel_templates() -> list[str]:
    return [record["name"] for record in get_template_table()]
