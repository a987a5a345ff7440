from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Literal, TypeAlias

ReferenceKind = Literal["pipeline", "pipeline-file", "source"]
InputOrigin = Literal["org.osbuild.pipeline", "org.osbuild.source"]

PIPELINE_ORIGIN = "org.osbuild.pipeline"
SOURCE_ORIGIN = "org.osbuild.source"
NAME_PREFIX = "name:"


def _non_empty(value: Any, *, label: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise TypeError(f"{label} must be a non-empty string")
    return value.strip()


@dataclass(frozen=True)
class PipelineRef:
    """Consume an identified artifact (e.g. a commit ref) produced by another pipeline.

    `name` is the reference string exactly as the stage input carries it, usually
    ``"name:" + upstream.name``.
    """

    name: str
    ref: str | None = None

    kind: ReferenceKind = field(default="pipeline", init=False)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise TypeError("PipelineRef.name must be a non-empty string")
        if self.ref is not None and not isinstance(self.ref, str):
            raise TypeError(f"PipelineRef.ref must be a string or None (type={type(self.ref).__name__})")

    @property
    def pipeline_name(self) -> str:
        # Only one prefix is stripped; upstream names may contain "name:" themselves.
        if self.name.startswith(NAME_PREFIX):
            return self.name[len(NAME_PREFIX) :]
        return self.name


@dataclass(frozen=True)
class PipelineFileRef:
    """Consume a named file produced by another pipeline."""

    name: str
    file: str

    kind: ReferenceKind = field(default="pipeline-file", init=False)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise TypeError("PipelineFileRef.name must be a non-empty string")
        if not isinstance(self.file, str) or not self.file:
            raise TypeError("PipelineFileRef.file must be a non-empty string")

    @property
    def pipeline_name(self) -> str:
        return self.name


@dataclass(frozen=True)
class SourceRef:
    checksum: str

    kind: ReferenceKind = field(default="source", init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "checksum", _non_empty(self.checksum, label="SourceRef.checksum"))


Reference: TypeAlias = PipelineRef | PipelineFileRef | SourceRef


@dataclass(frozen=True)
class StageInput:
    type: str
    origin: InputOrigin
    references: tuple[Reference, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", _non_empty(self.type, label="StageInput.type"))
        if self.origin not in (PIPELINE_ORIGIN, SOURCE_ORIGIN):
            raise ValueError(f"Invalid StageInput.origin: {self.origin!r}")

        refs = tuple(self.references)
        if not refs:
            raise ValueError(f"StageInput {self.type} must have at least one reference")
        for idx, ref in enumerate(refs):
            if not isinstance(ref, (PipelineRef, PipelineFileRef, SourceRef)):
                raise TypeError(
                    f"StageInput.references[{idx}] must be a reference (type={type(ref).__name__})"
                )
            expected = SOURCE_ORIGIN if isinstance(ref, SourceRef) else PIPELINE_ORIGIN
            if expected != self.origin:
                raise ValueError(
                    f"StageInput.references[{idx}] kind={ref.kind} does not match origin={self.origin}"
                )
        object.__setattr__(self, "references", refs)

    def pipeline_references(self) -> tuple[PipelineRef | PipelineFileRef, ...]:
        return tuple(ref for ref in self.references if not isinstance(ref, SourceRef))

    def to_dict(self) -> dict[str, Any]:
        references: Any
        if all(isinstance(ref, PipelineRef) and ref.ref is None for ref in self.references):
            references = [ref.name for ref in self.references]  # type: ignore[union-attr]
        else:
            references = {}
            for ref in self.references:
                if isinstance(ref, PipelineRef):
                    references[ref.name] = {"ref": ref.ref} if ref.ref is not None else {}
                elif isinstance(ref, PipelineFileRef):
                    references[NAME_PREFIX + ref.name] = {"file": ref.file}
                else:
                    references[ref.checksum] = {}
        return {"type": self.type, "origin": self.origin, "references": references}


def pipeline_input(input_type: str, *refs: PipelineRef | PipelineFileRef) -> StageInput:
    return StageInput(type=input_type, origin=PIPELINE_ORIGIN, references=tuple(refs))


def source_input(input_type: str, checksums: tuple[str, ...] | list[str]) -> StageInput:
    return StageInput(
        type=input_type,
        origin=SOURCE_ORIGIN,
        references=tuple(SourceRef(checksum) for checksum in checksums),
    )


@dataclass(frozen=True)
class Stage:
    """One opaque unit of work understood by the build-execution engine.

    `options` and `inputs` are copied on construction and exposed read-only.
    """

    type: str
    options: Mapping[str, Any] = field(default_factory=dict)
    inputs: Mapping[str, StageInput] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", _non_empty(self.type, label="Stage.type"))
        if not isinstance(self.options, Mapping):
            raise TypeError(f"Stage options must be a mapping (type={type(self.options).__name__})")
        if not isinstance(self.inputs, Mapping):
            raise TypeError(f"Stage inputs must be a mapping (type={type(self.inputs).__name__})")
        for key, value in self.inputs.items():
            if not isinstance(key, str) or not key.strip():
                raise TypeError(f"Stage {self.type} input keys must be non-empty strings")
            if not isinstance(value, StageInput):
                raise TypeError(
                    f"Stage {self.type} input {key!r} must be a StageInput (type={type(value).__name__})"
                )
        object.__setattr__(self, "options", MappingProxyType(copy.deepcopy(dict(self.options))))
        object.__setattr__(self, "inputs", MappingProxyType(dict(self.inputs)))

    def pipeline_references(self) -> tuple[PipelineRef | PipelineFileRef, ...]:
        refs: list[PipelineRef | PipelineFileRef] = []
        for stage_input in self.inputs.values():
            refs.extend(stage_input.pipeline_references())
        return tuple(refs)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"type": self.type}
        if self.inputs:
            out["inputs"] = {key: value.to_dict() for key, value in self.inputs.items()}
        out["options"] = copy.deepcopy(dict(self.options))
        return out


@dataclass(frozen=True)
class StageType:
    """A registered stage kind. Builds validated `Stage` descriptors of its type."""

    id: str
    doc: str | None = None
    source: str | None = None
    tags: tuple[str, ...] = ()
    inputs: tuple[str, ...] = ()
    required_inputs: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id.strip():
            raise TypeError("StageType.id must be a non-empty string")
        object.__setattr__(self, "id", self.id.strip())

        if self.doc is not None and (not isinstance(self.doc, str) or not self.doc.strip()):
            raise TypeError("StageType.doc must be a non-empty string or None")
        if self.source is not None and (
            not isinstance(self.source, str) or not self.source.strip()
        ):
            raise TypeError("StageType.source must be a non-empty string or None")

        if self.tags:
            object.__setattr__(
                self, "tags", tuple(str(tag).strip() for tag in self.tags if str(tag).strip())
            )

        unknown_required = [key for key in self.required_inputs if key not in self.inputs]
        if unknown_required:
            raise ValueError(
                f"StageType {self.id} requires undeclared inputs: {', '.join(unknown_required)}"
            )

    def stage(
        self,
        options: Mapping[str, Any] | None = None,
        *,
        inputs: Mapping[str, StageInput] | None = None,
    ) -> Stage:
        given = dict(inputs or {})
        unknown = sorted(key for key in given if key not in self.inputs)
        if unknown:
            accepted = ", ".join(self.inputs) or "<none>"
            raise ValueError(
                f"Stage {self.id} does not accept inputs: {', '.join(unknown)} (accepted: {accepted})"
            )
        missing = [key for key in self.required_inputs if key not in given]
        if missing:
            raise ValueError(f"Stage {self.id} missing required inputs: {', '.join(missing)}")
        return Stage(type=self.id, options=dict(options or {}), inputs=given)
