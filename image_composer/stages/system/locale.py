from __future__ import annotations

from manifestkit.stage_types import Stage, StageType

KIND_ID = "org.osbuild.locale"


def locale_stage(language: str) -> Stage:
    if not isinstance(language, str) or not language.strip():
        raise ValueError(f"{KIND_ID} language must be a non-empty string")
    return STAGE.stage({"language": language.strip()})


STAGE = StageType(
    id=KIND_ID,
    doc="Set the system locale.",
    source="image_composer.stages.system.locale.locale_stage",
    tags=("system",),
)
