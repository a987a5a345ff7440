"""Pipeline base value and its serialized form.

A pipeline is a named, ordered list of stages. It may run inside a build pipeline
(referenced by name only) and may expose a `ref` for downstream consumers. Concrete
pipelines do not subclass `Pipeline`; they create one per `serialize()` call and
append their stages in execution order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Protocol, runtime_checkable

from manifestkit.stage_types import NAME_PREFIX, Stage


class PipelineFrozenError(RuntimeError):
    """Raised when a stage is appended to a pipeline that was already serialized."""


class NamedPipeline(Protocol):
    @property
    def name(self) -> str:
        ...


@runtime_checkable
class ManifestPipeline(Protocol):
    """Capability set every concrete pipeline implements."""

    @property
    def name(self) -> str:
        ...

    @property
    def ref(self) -> str | None:
        ...

    @property
    def build(self) -> NamedPipeline | None:
        ...

    def serialize(self) -> "SerializedPipeline":
        ...


def validate_pipeline_name(name: Any, *, label: str = "Pipeline name") -> str:
    if not isinstance(name, str):
        raise TypeError(f"{label} must be a string (type={type(name).__name__})")
    normalized = name.strip()
    if not normalized:
        raise ValueError(f"{label} cannot be empty")
    return normalized


@dataclass(frozen=True)
class SerializedPipeline:
    name: str
    build: str | None = None
    runner: str | None = None
    stages: tuple[Stage, ...] = ()

    @property
    def build_name(self) -> str | None:
        if self.build is None:
            return None
        if self.build.startswith(NAME_PREFIX):
            return self.build[len(NAME_PREFIX) :]
        return self.build

    def dependencies(self) -> Iterator[tuple[str, str]]:
        """Yield (pipeline_name, referrer) pairs: build first, then stage inputs in order."""

        build_name = self.build_name
        if build_name is not None:
            yield build_name, "build"
        for idx, stage in enumerate(self.stages):
            for ref in stage.pipeline_references():
                yield ref.pipeline_name, f"stages[{idx}]({stage.type})"

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name}
        if self.build is not None:
            out["build"] = self.build
        if self.runner is not None:
            out["runner"] = self.runner
        out["stages"] = [stage.to_dict() for stage in self.stages]
        return out


@dataclass
class Pipeline:
    name: str
    build: NamedPipeline | None = None
    ref: str | None = None
    runner: str | None = None
    _stages: list[Stage] = field(default_factory=list, init=False, repr=False)
    _frozen: bool = field(default=False, init=False, repr=False)

    def __post_init__(self) -> None:
        self.name = validate_pipeline_name(self.name)
        if self.build is not None:
            validate_pipeline_name(getattr(self.build, "name", None), label="Build pipeline name")
        if self.ref is not None and (not isinstance(self.ref, str) or not self.ref.strip()):
            raise ValueError(f"Pipeline {self.name} ref must be a non-empty string or None")
        if self.runner is not None and (not isinstance(self.runner, str) or not self.runner.strip()):
            raise ValueError(f"Pipeline {self.name} runner must be a non-empty string or None")

    @property
    def stages(self) -> tuple[Stage, ...]:
        return tuple(self._stages)

    def add_stage(self, stage: Stage) -> None:
        if self._frozen:
            raise PipelineFrozenError(f"Pipeline {self.name} is already serialized")
        if not isinstance(stage, Stage):
            raise TypeError(f"Pipeline {self.name} stages must be Stage (type={type(stage).__name__})")
        self._stages.append(stage)

    def serialize(self) -> SerializedPipeline:
        self._frozen = True
        build = None
        if self.build is not None:
            build = NAME_PREFIX + self.build.name
        return SerializedPipeline(
            name=self.name,
            build=build,
            runner=self.runner,
            stages=tuple(self._stages),
        )
