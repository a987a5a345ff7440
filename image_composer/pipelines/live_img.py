from __future__ import annotations

from dataclasses import dataclass, field

from image_composer.stages.image.copy import copy_tree_stage
from image_composer.stages.image.truncate import truncate_stage
from manifestkit.pipeline import NamedPipeline, Pipeline, SerializedPipeline, validate_pipeline_name
from manifestkit.stage_types import NAME_PREFIX, PipelineRef

DEFAULT_NAME = "image"
DEFAULT_FILENAME = "disk.img"
MIN_SIZE = 1024 * 1024


@dataclass(frozen=True)
class LiveImgPipeline:
    """A raw disk image file holding the tree of another pipeline."""

    build: NamedPipeline | None
    tree: NamedPipeline
    size: int
    filename: str = DEFAULT_FILENAME
    name: str = DEFAULT_NAME
    ref: str | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", validate_pipeline_name(self.name))
        validate_pipeline_name(getattr(self.tree, "name", None), label=f"Pipeline {self.name} tree name")
        if not isinstance(self.filename, str) or not self.filename.strip() or "/" in self.filename:
            raise ValueError(f"Pipeline {self.name} filename must be a plain file name (got {self.filename!r})")
        if isinstance(self.size, bool) or not isinstance(self.size, int) or self.size < MIN_SIZE:
            raise ValueError(f"Pipeline {self.name} size must be an int >= {MIN_SIZE} (got {self.size!r})")

    def serialize(self) -> SerializedPipeline:
        pipeline = Pipeline(self.name, build=self.build)
        pipeline.add_stage(truncate_stage(self.filename, size=self.size))
        pipeline.add_stage(copy_tree_stage(PipelineRef(NAME_PREFIX + self.tree.name), to="mount://root/"))
        return pipeline.serialize()
