from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from image_composer.rpmmd import PackageSpec, RepoConfig
from image_composer.stages.system.rpm import rpm_stage
from image_composer.stages.system.selinux import DEFAULT_FILE_CONTEXTS, selinux_stage
from manifestkit.pipeline import Pipeline, SerializedPipeline, validate_pipeline_name

DEFAULT_NAME = "build"

# cp must keep install_exec_t so it may write labels the host policy does not know.
BUILDROOT_LABELS: dict[str, str] = {"/usr/bin/cp": "system_u:object_r:install_exec_t:s0"}


@dataclass(frozen=True)
class BuildPipeline:
    """The build root other pipelines execute their stages in.

    It runs on the host through `runner` and has no build pipeline of its own.
    """

    runner: str
    repos: Sequence[RepoConfig]
    packages: Sequence[PackageSpec]
    name: str = DEFAULT_NAME
    ref: str | None = field(default=None, init=False)
    build: None = field(default=None, init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", validate_pipeline_name(self.name))
        if not isinstance(self.runner, str) or not self.runner.strip():
            raise ValueError(f"Pipeline {self.name} runner must be a non-empty string")
        if not self.packages:
            raise ValueError(f"Pipeline {self.name} requires at least one package spec")
        object.__setattr__(self, "repos", tuple(self.repos))
        object.__setattr__(self, "packages", tuple(self.packages))

    def serialize(self) -> SerializedPipeline:
        pipeline = Pipeline(self.name, runner=self.runner)
        pipeline.add_stage(rpm_stage(self.repos, self.packages))
        pipeline.add_stage(selinux_stage(DEFAULT_FILE_CONTEXTS, labels=BUILDROOT_LABELS))
        return pipeline.serialize()
