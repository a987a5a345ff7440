from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from image_composer.rpmmd import PackageSpec, RepoConfig
from image_composer.stages.system.locale import locale_stage
from image_composer.stages.system.rpm import rpm_stage
from image_composer.stages.system.selinux import DEFAULT_FILE_CONTEXTS, selinux_stage
from image_composer.stages.system.selinux_config import SELINUX_STATES, selinux_config_stage
from manifestkit.pipeline import NamedPipeline, Pipeline, SerializedPipeline, validate_pipeline_name

DEFAULT_NAME = "os"
DEFAULT_LANGUAGE = "en_US.UTF-8"
DEFAULT_SELINUX_STATE = "enforcing"


@dataclass(frozen=True)
class OSPipeline:
    """The operating system tree that images and commits are made from."""

    build: NamedPipeline | None
    repos: Sequence[RepoConfig]
    packages: Sequence[PackageSpec]
    language: str = DEFAULT_LANGUAGE
    selinux_state: str = DEFAULT_SELINUX_STATE
    name: str = DEFAULT_NAME
    ref: str | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", validate_pipeline_name(self.name))
        if not self.packages:
            raise ValueError(f"Pipeline {self.name} requires at least one package spec")
        if self.selinux_state not in SELINUX_STATES:
            raise ValueError(
                f"Pipeline {self.name} selinux_state must be one of: {', '.join(SELINUX_STATES)} "
                f"(got {self.selinux_state!r})"
            )
        object.__setattr__(self, "repos", tuple(self.repos))
        object.__setattr__(self, "packages", tuple(self.packages))

    def serialize(self) -> SerializedPipeline:
        pipeline = Pipeline(self.name, build=self.build)
        pipeline.add_stage(rpm_stage(self.repos, self.packages))
        pipeline.add_stage(locale_stage(self.language))
        pipeline.add_stage(selinux_config_stage(self.selinux_state))  # type: ignore[arg-type]
        pipeline.add_stage(selinux_stage(DEFAULT_FILE_CONTEXTS))
        return pipeline.serialize()
