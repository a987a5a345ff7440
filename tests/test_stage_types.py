import pytest

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


def test_pipeline_ref_strips_exactly_one_name_prefix():
    assert PipelineRef("name:os").pipeline_name == "os"
    assert PipelineRef("name:name:os").pipeline_name == "name:os"
    assert PipelineRef("os").pipeline_name == "os"


def test_pipeline_file_ref_requires_name_and_file():
    with pytest.raises(TypeError, match=r"PipelineFileRef\.file"):
        PipelineFileRef("image", "")
    with pytest.raises(TypeError, match=r"PipelineFileRef\.name"):
        PipelineFileRef("", "disk.img")


def test_reference_kinds_stay_distinct():
    assert PipelineRef("name:commit", "ref").kind == "pipeline"
    assert PipelineFileRef("image", "disk.img").kind == "pipeline-file"
    assert SourceRef("sha256:abc").kind == "source"


def test_stage_input_rejects_mixed_origins():
    with pytest.raises(ValueError, match=r"does not match origin"):
        StageInput(
            type="org.osbuild.files",
            origin="org.osbuild.pipeline",
            references=(SourceRef("sha256:abc"),),
        )


def test_stage_input_rejects_empty_references():
    with pytest.raises(ValueError, match=r"at least one reference"):
        StageInput(type="org.osbuild.files", origin="org.osbuild.source", references=())


def test_stage_input_renders_each_reference_shape():
    commits = pipeline_input("org.osbuild.ostree", PipelineRef("name:ostree-commit", "fedora/35/x86_64/edge"))
    assert commits.to_dict() == {
        "type": "org.osbuild.ostree",
        "origin": "org.osbuild.pipeline",
        "references": {"name:ostree-commit": {"ref": "fedora/35/x86_64/edge"}},
    }

    image = pipeline_input("org.osbuild.files", PipelineFileRef("image", "disk.img"))
    assert image.to_dict()["references"] == {"name:image": {"file": "disk.img"}}

    tree = pipeline_input("org.osbuild.tree", PipelineRef("name:os"))
    assert tree.to_dict()["references"] == ["name:os"]

    packages = source_input("org.osbuild.files", ["sha256:a", "sha256:b"])
    assert packages.to_dict() == {
        "type": "org.osbuild.files",
        "origin": "org.osbuild.source",
        "references": {"sha256:a": {}, "sha256:b": {}},
    }


def test_stage_pipeline_references_skip_sources():
    stage = Stage(
        type="org.osbuild.example",
        inputs={
            "packages": source_input("org.osbuild.files", ["sha256:a"]),
            "tree": pipeline_input("org.osbuild.tree", PipelineRef("name:os")),
        },
    )
    assert stage.pipeline_references() == (PipelineRef("name:os"),)


def test_stage_to_dict_omits_empty_inputs():
    assert Stage(type="org.osbuild.locale", options={"language": "en_US"}).to_dict() == {
        "type": "org.osbuild.locale",
        "options": {"language": "en_US"},
    }


def test_stage_is_immutable():
    stage = Stage(type="org.osbuild.locale")
    with pytest.raises(Exception):
        stage.type = "org.osbuild.other"  # type: ignore[misc]


def test_stage_rejects_non_mapping_options():
    with pytest.raises(TypeError, match=r"options must be a mapping"):
        Stage(type="org.osbuild.locale", options=["en_US"])  # type: ignore[arg-type]


def test_stage_type_validates_input_keys():
    stage_type = StageType(id="org.osbuild.qemu", inputs=("image",), required_inputs=("image",))
    image = pipeline_input("org.osbuild.files", PipelineFileRef("image", "disk.img"))

    with pytest.raises(ValueError, match=r"missing required inputs: image"):
        stage_type.stage({"filename": "disk.qcow2"})
    with pytest.raises(ValueError, match=r"does not accept inputs: tree"):
        stage_type.stage({}, inputs={"image": image, "tree": image})

    stage = stage_type.stage({"filename": "disk.qcow2"}, inputs={"image": image})
    assert stage.type == "org.osbuild.qemu"
    assert stage.inputs == {"image": image}


def test_stage_type_rejects_undeclared_required_inputs():
    with pytest.raises(ValueError, match=r"requires undeclared inputs: tree"):
        StageType(id="org.osbuild.copy", required_inputs=("tree",))


def test_stage_options_are_copied_and_read_only():
    modules = ["bash", "systemd"]
    options = {"kernel": ["5.14.10-300.fc35.x86_64"], "modules": modules}
    stage = Stage(type="org.osbuild.dracut", options=options)

    modules.append("late")
    options["kernel"] = ["other"]
    assert stage.options == {"kernel": ["5.14.10-300.fc35.x86_64"], "modules": ["bash", "systemd"]}

    with pytest.raises(TypeError):
        stage.options["kernel"] = ["hacked"]  # type: ignore[index]
    with pytest.raises(TypeError):
        stage.inputs["tree"] = pipeline_input("org.osbuild.tree", PipelineRef("name:os"))  # type: ignore[index]


def test_stage_to_dict_does_not_share_nested_values():
    stage = Stage(type="org.osbuild.dracut", options={"modules": ["bash"], "users": {"root": {}}})

    rendered = stage.to_dict()
    rendered["options"]["modules"].append("injected")
    rendered["options"]["users"]["root"]["password"] = "x"

    assert stage.to_dict()["options"] == {"modules": ["bash"], "users": {"root": {}}}
