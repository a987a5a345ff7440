from __future__ import annotations

from manifestkit.stage_types import Stage, StageType

KIND_ID = "org.osbuild.truncate"


def truncate_stage(filename: str, *, size: int) -> Stage:
    if not isinstance(filename, str) or not filename.strip() or "/" in filename:
        raise ValueError(f"{KIND_ID} filename must be a plain file name (got {filename!r})")
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise ValueError(f"{KIND_ID} size must be a positive int (got {size!r})")
    return STAGE.stage({"filename": filename, "size": str(size)})


STAGE = StageType(
    id=KIND_ID,
    doc="Create an empty file of a fixed size.",
    source="image_composer.stages.image.truncate.truncate_stage",
    tags=("image",),
)
