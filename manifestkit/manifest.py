from __future__ import annotations

"""Manifest assembly: discover, validate and order pipelines for one build request.

The assembler serializes every pipeline of the request once, then walks build links
and stage input references from the requested outputs. References are resolved by
name only; a pipeline is emitted after every pipeline it references.
"""

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from manifestkit.pipeline import ManifestPipeline, SerializedPipeline

MANIFEST_VERSION = "2"

logger = logging.getLogger(__name__)


class ManifestError(ValueError):
    """Base class for assembly-time failures."""


class DuplicatePipelineNameError(ManifestError):
    pass


class DanglingReferenceError(ManifestError):
    pass


class DependencyCycleError(ManifestError):
    pass


@dataclass(frozen=True)
class Manifest:
    pipelines: tuple[SerializedPipeline, ...]
    sources: dict[str, Any] = field(default_factory=dict)

    @property
    def pipeline_names(self) -> tuple[str, ...]:
        return tuple(pipeline.name for pipeline in self.pipelines)

    def get(self, name: str) -> SerializedPipeline:
        for pipeline in self.pipelines:
            if pipeline.name == name:
                return pipeline
        available = ", ".join(self.pipeline_names) or "<none>"
        raise KeyError(f"Unknown pipeline: {name} (available: {available})")

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": MANIFEST_VERSION,
            "pipelines": [pipeline.to_dict() for pipeline in self.pipelines],
            "sources": dict(self.sources),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)


def _serialize_pool(
    outputs: tuple[ManifestPipeline, ...], pipelines: tuple[ManifestPipeline, ...]
) -> dict[str, SerializedPipeline]:
    serialized: dict[str, SerializedPipeline] = {}
    seen: list[ManifestPipeline] = []
    for candidate in (*outputs, *pipelines):
        # The same object may be listed both as output and pool member.
        if any(candidate is existing for existing in seen):
            continue
        seen.append(candidate)

        if not isinstance(candidate, ManifestPipeline):
            raise TypeError(
                f"Manifest pipelines must implement name/ref/build/serialize (type={type(candidate).__name__})"
            )
        result = candidate.serialize()
        if not isinstance(result, SerializedPipeline):
            raise TypeError(
                f"Pipeline {candidate.name} serialize() returned {type(result).__name__}, "
                "expected SerializedPipeline"
            )
        if result.name in serialized:
            raise DuplicatePipelineNameError(f"Duplicate pipeline name: {result.name}")
        serialized[result.name] = result
    return serialized


def assemble_manifest(
    outputs: ManifestPipeline | Iterable[ManifestPipeline],
    *,
    pipelines: Iterable[ManifestPipeline] = (),
    sources: Mapping[str, Any] | None = None,
) -> Manifest:
    """Assemble the ordered manifest for the requested output pipeline(s).

    `pipelines` is the remaining pool of the build request; only pipelines reachable
    from `outputs` are emitted. Raises `DuplicatePipelineNameError` on name
    collisions, `DanglingReferenceError` when a reference names no pipeline of the
    request, and `DependencyCycleError` on cyclic references.
    """

    if isinstance(outputs, ManifestPipeline):
        output_list: tuple[ManifestPipeline, ...] = (outputs,)
    else:
        output_list = tuple(outputs)
    if not output_list:
        raise ValueError("assemble_manifest requires at least one output pipeline")

    pool = _serialize_pool(output_list, tuple(pipelines))

    ordered: list[SerializedPipeline] = []
    state: dict[str, str] = {}

    def visit(name: str, trail: list[str]) -> None:
        status = state.get(name)
        if status == "done":
            return
        if status == "visiting":
            cycle = " -> ".join([*trail[trail.index(name) :], name])
            raise DependencyCycleError(f"Pipeline dependency cycle: {cycle}")

        state[name] = "visiting"
        current = pool[name]
        for dependency, referrer in current.dependencies():
            if dependency not in pool:
                available = ", ".join(pool) or "<none>"
                raise DanglingReferenceError(
                    f"Pipeline {name} {referrer} references unknown pipeline: {dependency} "
                    f"(available: {available})"
                )
            visit(dependency, [*trail, name])
        state[name] = "done"
        ordered.append(current)

    for output in output_list:
        visit(output.name, [])

    unused = sorted(name for name in pool if name not in state)
    if unused:
        logger.debug("Pipelines not reachable from outputs: %s", ", ".join(unused))
    logger.debug("Assembled manifest: %s", ", ".join(p.name for p in ordered))

    return Manifest(pipelines=tuple(ordered), sources=dict(sources or {}))
