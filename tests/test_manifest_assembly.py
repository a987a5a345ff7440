import json
import logging

import pytest

from manifestkit.manifest import (
    DanglingReferenceError,
    DependencyCycleError,
    DuplicatePipelineNameError,
    assemble_manifest,
)
from manifestkit.pipeline import Pipeline
from manifestkit.stage_types import PipelineFileRef, PipelineRef, Stage, pipeline_input


def _tree_stage(upstream: str) -> Stage:
    return Stage(
        type="org.osbuild.copy",
        inputs={"tree": pipeline_input("org.osbuild.tree", PipelineRef("name:" + upstream))},
    )


def test_assembler_orders_dependencies_before_consumers():
    build = Pipeline("build", runner="org.osbuild.fedora35")
    tree = Pipeline("os", build=build)
    image = Pipeline("image", build=build)
    image.add_stage(_tree_stage("os"))
    qcow2 = Pipeline("qcow2", build=build)
    qcow2.add_stage(
        Stage(
            type="org.osbuild.qemu",
            inputs={"image": pipeline_input("org.osbuild.files", PipelineFileRef("image", "disk.img"))},
        )
    )

    manifest = assemble_manifest(qcow2, pipelines=[qcow2, image, tree, build])
    assert manifest.pipeline_names == ("build", "os", "image", "qcow2")


def test_assembler_skips_unreachable_pipelines(caplog):
    build = Pipeline("build", runner="org.osbuild.fedora35")
    tree = Pipeline("os", build=build)
    unused = Pipeline("unused", build=build)

    with caplog.at_level(logging.DEBUG, logger="manifestkit"):
        manifest = assemble_manifest(tree, pipelines=[build, unused])

    assert manifest.pipeline_names == ("build", "os")
    assert "Pipelines not reachable from outputs: unused" in caplog.text


def test_assembler_rejects_duplicate_pipeline_names():
    build = Pipeline("build", runner="org.osbuild.fedora35")
    first = Pipeline("os", build=build)
    second = Pipeline("os", build=build)

    with pytest.raises(DuplicatePipelineNameError, match=r"Duplicate pipeline name: os"):
        assemble_manifest(first, pipelines=[build, second])


def test_assembler_rejects_dangling_references():
    tree = Pipeline("container-tree")
    tree.add_stage(_tree_stage("missing"))

    with pytest.raises(DanglingReferenceError) as excinfo:
        assemble_manifest(tree)

    message = str(excinfo.value)
    assert "Pipeline container-tree stages[0](org.osbuild.copy)" in message
    assert "references unknown pipeline: missing" in message


def test_assembler_rejects_missing_build_pipeline():
    build = Pipeline("build", runner="org.osbuild.fedora35")
    tree = Pipeline("os", build=build)

    with pytest.raises(DanglingReferenceError, match=r"Pipeline os build references unknown pipeline: build"):
        assemble_manifest(tree)


def test_assembler_rejects_dependency_cycles():
    second = Pipeline("b")
    first = Pipeline("a", build=second)
    second.add_stage(_tree_stage("a"))

    with pytest.raises(DependencyCycleError, match=r"Pipeline dependency cycle: a -> b -> a"):
        assemble_manifest(first, pipelines=[second])


def test_assembler_resolves_names_containing_the_name_prefix():
    odd = Pipeline("name:odd")
    consumer = Pipeline("consumer")
    consumer.add_stage(_tree_stage("name:odd"))

    manifest = assemble_manifest(consumer, pipelines=[odd])
    assert manifest.pipeline_names == ("name:odd", "consumer")
    references = manifest.get("consumer").to_dict()["stages"][0]["inputs"]["tree"]["references"]
    assert references == ["name:name:odd"]


def test_assembler_requires_an_output():
    with pytest.raises(ValueError, match=r"requires at least one output pipeline"):
        assemble_manifest([])


def test_assembler_rejects_objects_without_pipeline_capabilities():
    with pytest.raises(TypeError, match=r"must implement name/ref/build/serialize"):
        assemble_manifest([object()])  # type: ignore[list-item]


def test_manifest_to_json_has_version_pipelines_and_sources():
    build = Pipeline("build", runner="org.osbuild.fedora35")
    manifest = assemble_manifest(build, sources={"org.osbuild.curl": {"items": {}}})

    payload = json.loads(manifest.to_json())
    assert payload == {
        "version": "2",
        "pipelines": [{"name": "build", "runner": "org.osbuild.fedora35", "stages": []}],
        "sources": {"org.osbuild.curl": {"items": {}}},
    }


def test_manifest_get_unknown_pipeline_lists_available():
    manifest = assemble_manifest(Pipeline("build"))
    with pytest.raises(KeyError, match=r"Unknown pipeline: os"):
        manifest.get("os")
