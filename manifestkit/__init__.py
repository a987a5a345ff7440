"""Reusable manifest composition kernel (stage descriptors, pipelines, assembly).

This package is intentionally independent of `image_composer.*`. Stage vocabularies,
image types and request formats live in the consuming application.
"""

from manifestkit.config_namespace import ConfigNamespace
from manifestkit.manifest import (
    MANIFEST_VERSION,
    DanglingReferenceError,
    DependencyCycleError,
    DuplicatePipelineNameError,
    Manifest,
    ManifestError,
    assemble_manifest,
)
from manifestkit.pipeline import (
    ManifestPipeline,
    Pipeline,
    PipelineFrozenError,
    SerializedPipeline,
)
from manifestkit.stage_registry import StageRegistry
from manifestkit.stage_types import (
    PipelineFileRef,
    PipelineRef,
    SourceRef,
    Stage,
    StageInput,
    StageType,
    pipeline_input,
    source_input,
)

__all__ = [
    "MANIFEST_VERSION",
    "ConfigNamespace",
    "DanglingReferenceError",
    "DependencyCycleError",
    "DuplicatePipelineNameError",
    "Manifest",
    "ManifestError",
    "ManifestPipeline",
    "Pipeline",
    "PipelineFileRef",
    "PipelineFrozenError",
    "PipelineRef",
    "SerializedPipeline",
    "SourceRef",
    "Stage",
    "StageInput",
    "StageRegistry",
    "StageType",
    "assemble_manifest",
    "pipeline_input",
    "source_input",
]
