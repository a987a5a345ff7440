"""The stage vocabulary a manifest may use, as known to the application."""

from __future__ import annotations

import difflib
from dataclasses import dataclass
from typing import Any, Iterable

from manifestkit.stage_types import StageType


@dataclass(frozen=True)
class StageRegistry:
    _by_id: dict[str, StageType]

    @classmethod
    def from_types(cls, types: Iterable[StageType]) -> "StageRegistry":
        by_id: dict[str, StageType] = {}
        for stage_type in types:
            if stage_type.id in by_id:
                raise ValueError(f"Duplicate stage type id: {stage_type.id}")
            by_id[stage_type.id] = stage_type
        return cls(_by_id=by_id)

    def __contains__(self, stage_id: object) -> bool:
        return isinstance(stage_id, str) and stage_id in self._by_id

    def available(self) -> tuple[str, ...]:
        return tuple(sorted(self._by_id))

    def describe(self) -> tuple[dict[str, Any], ...]:
        """One row per stage type, sorted by id, for listings."""

        return tuple(
            {
                "stage_id": stage_id,
                "doc": self._by_id[stage_id].doc,
                "source": self._by_id[stage_id].source,
                "tags": list(self._by_id[stage_id].tags),
                "inputs": list(self._by_id[stage_id].inputs),
                "required_inputs": list(self._by_id[stage_id].required_inputs),
            }
            for stage_id in self.available()
        )

    def suggest(self, stage_id: str, *, limit: int = 3) -> tuple[str, ...]:
        """Known ids close to `stage_id`.

        Ids share the ``org.osbuild.`` prefix, so full ids are compared first and the
        last dotted segment is used as a fallback for short or misspelled names.
        """

        wanted = (stage_id or "").strip()
        if not wanted:
            return ()

        known = self.available()
        close = difflib.get_close_matches(wanted, known, n=limit, cutoff=0.8)
        if close:
            return tuple(close)

        short = wanted.rsplit(".", 1)[-1]
        by_short: dict[str, list[str]] = {}
        for stage in known:
            by_short.setdefault(stage.rsplit(".", 1)[-1], []).append(stage)
        matches = difflib.get_close_matches(short, list(by_short), n=limit)
        return tuple(stage for name in matches for stage in by_short[name])[:limit]
