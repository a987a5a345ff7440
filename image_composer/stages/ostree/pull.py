from __future__ import annotations

from manifestkit.stage_types import PipelineRef, Stage, StageType, pipeline_input

KIND_ID = "org.osbuild.ostree.pull"


def ostree_pull_stage(repo: str, *, commits: PipelineRef) -> Stage:
    """Pull the commit identified by `commits` (pipeline name + ref) into `repo`."""

    if not isinstance(repo, str) or not repo.startswith("/"):
        raise ValueError(f"{KIND_ID} repo must be absolute (got {repo!r})")
    if not isinstance(commits, PipelineRef) or commits.ref is None:
        raise ValueError(f"{KIND_ID} commits must be a PipelineRef with a ref")
    return STAGE.stage(
        {"repo": repo},
        inputs={"commits": pipeline_input("org.osbuild.ostree", commits)},
    )


STAGE = StageType(
    id=KIND_ID,
    doc="Pull an ostree commit produced by another pipeline into a repository.",
    source="image_composer.stages.ostree.pull.ostree_pull_stage",
    tags=("ostree",),
    inputs=("commits",),
    required_inputs=("commits",),
)
