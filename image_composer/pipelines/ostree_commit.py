from __future__ import annotations

from dataclasses import dataclass

from image_composer.stages.ostree.commit import ostree_commit_stage
from image_composer.stages.ostree.init import ostree_init_stage
from manifestkit.pipeline import NamedPipeline, Pipeline, SerializedPipeline, validate_pipeline_name
from manifestkit.stage_types import NAME_PREFIX, PipelineRef

DEFAULT_NAME = "ostree-commit"
REPO_PATH = "/repo"


@dataclass(frozen=True)
class OSTreeCommitPipeline:
    """Commits the tree of another pipeline into an archive ostree repository.

    `ref` is the ostree branch (e.g. ``fedora/35/x86_64/iot``) downstream pipelines
    pull by.
    """

    build: NamedPipeline | None
    tree: NamedPipeline
    ref: str
    os_version: str | None = None
    parent: str | None = None
    name: str = DEFAULT_NAME

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", validate_pipeline_name(self.name))
        validate_pipeline_name(getattr(self.tree, "name", None), label=f"Pipeline {self.name} tree name")
        if not isinstance(self.ref, str) or not self.ref.strip():
            raise ValueError(f"Pipeline {self.name} ref must be a non-empty string")
        if self.ref.startswith("/") or self.ref.endswith("/"):
            raise ValueError(f"Pipeline {self.name} ref must not start or end with '/' (got {self.ref!r})")

    def serialize(self) -> SerializedPipeline:
        pipeline = Pipeline(self.name, build=self.build, ref=self.ref)
        pipeline.add_stage(ostree_init_stage(REPO_PATH, mode="archive"))
        pipeline.add_stage(
            ostree_commit_stage(
                self.ref,
                tree=PipelineRef(NAME_PREFIX + self.tree.name),
                os_version=self.os_version,
                parent=self.parent,
            )
        )
        return pipeline.serialize()
