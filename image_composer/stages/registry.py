from __future__ import annotations

from functools import lru_cache

from manifestkit.stage_registry import StageRegistry
from manifestkit.stage_types import StageType


@lru_cache(maxsize=1)
def get_stage_registry() -> StageRegistry:
    # Import side-effect: stage modules define `STAGE` symbols collected here.
    from image_composer.stages import image, installer, ostree, server, system  # noqa: PLC0415

    types: list[StageType] = []
    for pkg in (system, installer, ostree, server, image):
        exported = getattr(pkg, "__all_stages__", None)
        if isinstance(exported, (list, tuple)):
            types.extend(exported)

    return StageRegistry.from_types(types)


def list_stages() -> None:
    for entry in get_stage_registry().describe():
        doc = entry.get("doc") or ""
        print(f"{entry['stage_id']}\t{doc}")
