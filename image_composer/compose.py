from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from image_composer.image_types import ImageTypeManager
from image_composer.request import ComposeRequest
from image_composer.rpmmd import PackageSpec, curl_sources
from image_composer.stages.registry import get_stage_registry
from manifestkit.manifest import Manifest, assemble_manifest
from manifestkit.stage_registry import StageRegistry
from manifestkit.stage_types import SourceRef

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComposeResult:
    image_type: str
    export: str
    manifest: Manifest


def validate_stage_types(manifest: Manifest, registry: StageRegistry) -> None:
    """Reject stages whose type the execution engine vocabulary does not define."""

    for pipeline in manifest.pipelines:
        for idx, stage in enumerate(pipeline.stages):
            if stage.type in registry:
                continue
            suggestions = registry.suggest(stage.type)
            hint = f" (did you mean: {', '.join(suggestions)})" if suggestions else ""
            raise ValueError(
                f"Unknown stage type in pipeline {pipeline.name} stages[{idx}]: {stage.type}{hint}"
            )


def referenced_checksums(manifest: Manifest) -> list[str]:
    checksums: list[str] = []
    for pipeline in manifest.pipelines:
        for stage in pipeline.stages:
            for stage_input in stage.inputs.values():
                for ref in stage_input.references:
                    if isinstance(ref, SourceRef) and ref.checksum not in checksums:
                        checksums.append(ref.checksum)
    return checksums


def _used_packages(request: ComposeRequest, checksums: list[str]) -> list[PackageSpec]:
    by_checksum: dict[str, PackageSpec] = {}
    for packages in request.package_sets.values():
        for package in packages:
            seen = by_checksum.setdefault(package.checksum, package)
            if seen.remote_location != package.remote_location:
                raise ValueError(
                    f"Checksum {package.checksum} maps to two locations: "
                    f"{seen.remote_location} and {package.remote_location}"
                )

    missing = [checksum for checksum in checksums if checksum not in by_checksum]
    if missing:
        raise ValueError(f"Stage inputs reference unknown package checksums: {', '.join(missing)}")
    return [by_checksum[checksum] for checksum in checksums]


def compose(request: ComposeRequest | Mapping[str, Any]) -> ComposeResult:
    if not isinstance(request, ComposeRequest):
        request = ComposeRequest.from_dict(request)

    logger.info("Composing image type %s for %s", request.image_type, request.arch)
    built = ImageTypeManager.build(request)
    logger.debug(
        "Image type %s built pipelines: %s",
        request.image_type,
        ", ".join(pipeline.name for pipeline in built.pipelines),
    )

    manifest = assemble_manifest(built.export, pipelines=built.pipelines)
    validate_stage_types(manifest, get_stage_registry())

    packages = _used_packages(request, referenced_checksums(manifest))
    manifest = replace(manifest, sources=curl_sources([packages]))

    logger.info(
        "Manifest ready: export=%s pipelines=%s packages=%d",
        built.export.name,
        ", ".join(manifest.pipeline_names),
        len(packages),
    )
    return ComposeResult(image_type=request.image_type, export=built.export.name, manifest=manifest)
