from __future__ import annotations

from manifestkit.stage_types import PipelineRef, Stage, StageType, pipeline_input

KIND_ID = "org.osbuild.ostree.commit"


def ostree_commit_stage(
    ref: str,
    *,
    tree: PipelineRef,
    os_version: str | None = None,
    parent: str | None = None,
) -> Stage:
    if not isinstance(ref, str) or not ref.strip():
        raise ValueError(f"{KIND_ID} ref must be a non-empty string")
    if not isinstance(tree, PipelineRef):
        raise TypeError(f"{KIND_ID} tree must be a PipelineRef (type={type(tree).__name__})")

    options: dict[str, str] = {"ref": ref}
    if os_version:
        options["os_version"] = os_version
    if parent:
        options["parent"] = parent
    return STAGE.stage(options, inputs={"tree": pipeline_input("org.osbuild.tree", tree)})


STAGE = StageType(
    id=KIND_ID,
    doc="Commit the tree of another pipeline into the ostree repository.",
    source="image_composer.stages.ostree.commit.ostree_commit_stage",
    tags=("ostree",),
    inputs=("tree",),
    required_inputs=("tree",),
)
