from __future__ import annotations

from manifestkit.stage_types import Stage, StageType

KIND_ID = "org.osbuild.lorax-script"


def lorax_script_stage(path: str, *, basearch: str) -> Stage:
    if not isinstance(path, str) or not path.strip():
        raise ValueError(f"{KIND_ID} path must be a non-empty string")
    if not isinstance(basearch, str) or not basearch.strip():
        raise ValueError(f"{KIND_ID} basearch must be a non-empty string")
    return STAGE.stage({"path": path, "basearch": basearch})


STAGE = StageType(
    id=KIND_ID,
    doc="Run a lorax template script against the tree.",
    source="image_composer.stages.installer.lorax_script.lorax_script_stage",
    tags=("installer",),
)
