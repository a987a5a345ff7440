from __future__ import annotations

from manifestkit.stage_types import PipelineRef, Stage, StageType, pipeline_input

KIND_ID = "org.osbuild.copy"


def copy_tree_stage(tree: PipelineRef, *, to: str) -> Stage:
    """Copy the whole tree of another pipeline to `to` (a mount or tree URL)."""

    if not isinstance(to, str) or not to.strip():
        raise ValueError(f"{KIND_ID} destination must be a non-empty string")
    return STAGE.stage(
        {"paths": [{"from": "input://tree/", "to": to}]},
        inputs={"tree": pipeline_input("org.osbuild.tree", tree)},
    )


STAGE = StageType(
    id=KIND_ID,
    doc="Copy files from an input tree.",
    source="image_composer.stages.image.copy.copy_tree_stage",
    tags=("image",),
    inputs=("tree",),
    required_inputs=("tree",),
)
