import os

import pytest

from image_composer.foundation.config_io import load_request
from image_composer.request import ComposeRequest

from conftest import request_data


def test_request_from_dict_parses_every_section():
    request = ComposeRequest.from_dict(request_data("edge-container", listen_port=8443))

    assert request.image_type == "edge-container"
    assert request.arch == "x86_64"
    assert request.distro.product == "Fedora"
    assert request.distro.version == "35"
    assert request.distro.variant is None
    assert [repo.name for repo in request.repos] == ["fedora"]
    assert request.repos[0].check_gpg is True
    assert set(request.package_sets) == {"build", "os", "container", "installer"}
    assert request.package_set("container")[0].name == "nginx"
    assert request.options == {"listen_port": 8443}


def test_request_arch_defaults_to_x86_64():
    raw = request_data("qcow2")
    del raw["arch"]
    assert ComposeRequest.from_dict(raw).arch == "x86_64"


def test_request_rejects_unsupported_arch():
    raw = request_data("qcow2")
    raw["arch"] = "riscv64"
    with pytest.raises(ValueError, match=r"arch must be one of"):
        ComposeRequest.from_dict(raw)


def test_request_rejects_unknown_keys_with_path():
    raw = request_data("qcow2")
    raw["repos"][0]["gpg_key"] = "typo"
    with pytest.raises(ValueError, match=r"Unknown config keys under repos\[0\]: gpg_key"):
        ComposeRequest.from_dict(raw)

    raw = request_data("qcow2")
    raw["distros"] = {}
    with pytest.raises(ValueError, match=r"Unknown config keys under <root>: distros"):
        ComposeRequest.from_dict(raw)


def test_request_rejects_duplicate_repository_names():
    raw = request_data("qcow2")
    raw["repos"].append(dict(raw["repos"][0]))
    with pytest.raises(ValueError, match=r"Duplicate repository name in repos: fedora"):
        ComposeRequest.from_dict(raw)


def test_request_package_fields_are_strict():
    raw = request_data("qcow2")
    raw["package_sets"]["os"][0]["epoch"] = "0"
    with pytest.raises(TypeError, match=r"package_sets\.os\[0\]\.epoch must be an int"):
        ComposeRequest.from_dict(raw)


def test_request_rejects_gpg_check_on_a_package():
    raw = request_data("qcow2")
    raw["package_sets"]["os"][0]["check_gpg"] = True
    with pytest.raises(ValueError, match=r"Unknown config keys under package_sets\.os\[0\]: check_gpg"):
        ComposeRequest.from_dict(raw)


def test_request_missing_package_set_names_image_type():
    raw = request_data("edge-installer")
    del raw["package_sets"]["installer"]
    request = ComposeRequest.from_dict(raw)
    with pytest.raises(ValueError, match=r"image_type=edge-installer requires package_sets\.installer"):
        request.package_set("installer")


def test_load_request_explicit_path(tmp_path, monkeypatch):
    monkeypatch.delenv("TEST_IMAGE_COMPOSER_REQUEST", raising=False)
    (tmp_path / "request.yaml").write_text("image_type: qcow2\ndistro:\n  version: '35'\n", encoding="utf-8")

    raw, meta = load_request(tmp_path / "request.yaml", env_var="TEST_IMAGE_COMPOSER_REQUEST")

    assert raw == {"image_type": "qcow2", "distro": {"version": "35"}}
    assert meta["mode"] == "explicit"
    assert os.path.basename(meta["paths"][0]) == "request.yaml"


def test_load_request_from_env_with_overlays(tmp_path, monkeypatch):
    (tmp_path / "request.yaml").write_text(
        "image_type: qcow2\noptions:\n  size: 1048576\n  compat: '0.10'\n", encoding="utf-8"
    )
    (tmp_path / "local.yaml").write_text("options:\n  compat: '1.1'\n  filename: out.qcow2\n", encoding="utf-8")
    monkeypatch.setenv("TEST_IMAGE_COMPOSER_REQUEST", str(tmp_path / "request.yaml"))

    raw, meta = load_request(overlays=[tmp_path / "local.yaml"], env_var="TEST_IMAGE_COMPOSER_REQUEST")

    assert raw["options"] == {"size": 1048576, "compat": "1.1", "filename": "out.qcow2"}
    assert meta["mode"] == "env+overlay"
    assert len(meta["paths"]) == 2


def test_load_request_overlay_type_mismatch_raises(tmp_path):
    (tmp_path / "request.yaml").write_text("options:\n  size: 1\n", encoding="utf-8")
    (tmp_path / "local.yaml").write_text("options: [1, 2]\n", encoding="utf-8")

    with pytest.raises(ValueError, match=r"Invalid request overlay merge at options"):
        load_request(tmp_path / "request.yaml", overlays=[tmp_path / "local.yaml"])


def test_load_request_overlay_null_sets_key_to_none(tmp_path):
    (tmp_path / "request.yaml").write_text("options:\n  compat: '0.10'\n  size: 1\n", encoding="utf-8")
    (tmp_path / "local.yaml").write_text("options:\n  compat: null\n", encoding="utf-8")

    raw, _ = load_request(tmp_path / "request.yaml", overlays=[tmp_path / "local.yaml"])

    assert raw["options"] == {"compat": None, "size": 1}


def test_load_request_invalid_yaml_raises(tmp_path):
    (tmp_path / "request.yaml").write_text("repos: [1, 2\n", encoding="utf-8")

    with pytest.raises(ValueError, match=r"Invalid YAML in"):
        load_request(tmp_path / "request.yaml")


def test_load_request_requires_a_path(monkeypatch):
    monkeypatch.delenv("TEST_IMAGE_COMPOSER_REQUEST", raising=False)
    with pytest.raises(ValueError, match=r"set TEST_IMAGE_COMPOSER_REQUEST"):
        load_request(env_var="TEST_IMAGE_COMPOSER_REQUEST")


def test_load_request_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError, match=r"Missing request file"):
        load_request(tmp_path / "missing.yaml")
