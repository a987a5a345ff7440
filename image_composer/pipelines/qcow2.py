from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from image_composer.stages.image.qemu import QCOW2_COMPAT_LEVELS, qemu_stage
from manifestkit.pipeline import NamedPipeline, Pipeline, SerializedPipeline, validate_pipeline_name
from manifestkit.stage_types import PipelineFileRef

DEFAULT_NAME = "qcow2"
DEFAULT_FILENAME = "disk.qcow2"


class ImageFileSource(Protocol):
    @property
    def name(self) -> str:
        ...

    @property
    def filename(self) -> str:
        ...


@dataclass(frozen=True)
class QCOW2Pipeline:
    """Turns the raw image file of `image` into a qcow2 image named `filename`."""

    build: NamedPipeline | None
    image: ImageFileSource
    filename: str = DEFAULT_FILENAME
    compat: str | None = None
    name: str = DEFAULT_NAME
    ref: str | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", validate_pipeline_name(self.name))
        validate_pipeline_name(getattr(self.image, "name", None), label=f"Pipeline {self.name} image name")
        source_file = getattr(self.image, "filename", None)
        if not isinstance(source_file, str) or not source_file.strip():
            raise ValueError(f"Pipeline {self.name} image pipeline {self.image.name} has no filename")
        if not isinstance(self.filename, str) or not self.filename.strip() or "/" in self.filename:
            raise ValueError(f"Pipeline {self.name} filename must be a plain file name (got {self.filename!r})")
        if self.compat is not None and self.compat not in QCOW2_COMPAT_LEVELS:
            raise ValueError(
                f"Pipeline {self.name} compat must be one of: {', '.join(QCOW2_COMPAT_LEVELS)} (got {self.compat!r})"
            )

    def serialize(self) -> SerializedPipeline:
        pipeline = Pipeline(self.name, build=self.build)
        pipeline.add_stage(
            qemu_stage(
                self.filename,
                image=PipelineFileRef(self.image.name, self.image.filename),
                format="qcow2",
                compat=self.compat,
            )
        )
        return pipeline.serialize()
