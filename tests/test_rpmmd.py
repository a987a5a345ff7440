import pytest

from image_composer.rpmmd import (
    PackageNotFoundError,
    PackageSpec,
    RepoConfig,
    curl_sources,
    get_ver_str_from_package_specs,
    gpg_keys,
)

from conftest import make_package


def test_ver_str_is_version_release_arch():
    packages = [make_package("glibc"), make_package("kernel", version="5.14.10", release="300.fc35")]
    assert get_ver_str_from_package_specs(packages, "kernel") == "5.14.10-300.fc35.x86_64"


def test_ver_str_missing_package_raises_with_context():
    with pytest.raises(PackageNotFoundError, match=r"Pipeline anaconda-tree kernel: Package 'kernel' not found") as excinfo:
        get_ver_str_from_package_specs([make_package("glibc")], "kernel", context="Pipeline anaconda-tree kernel")
    assert excinfo.value.package_name == "kernel"


def test_package_spec_checksum_needs_algorithm_prefix():
    with pytest.raises(ValueError, match=r"checksum must be '<algorithm>:<hex>'"):
        PackageSpec(
            name="nginx",
            epoch=0,
            version="1",
            release="1",
            arch="x86_64",
            remote_location="https://mirror.example.com/nginx.rpm",
            checksum="abc",
        )


def test_repo_config_requires_location_and_key_for_gpg_check():
    with pytest.raises(ValueError, match=r"needs a baseurl or a metalink"):
        RepoConfig(name="fedora")
    with pytest.raises(ValueError, match=r"sets check_gpg without a gpg_key"):
        RepoConfig(name="fedora", baseurl="https://mirror.example.com", check_gpg=True)


def test_gpg_keys_are_deduplicated_in_order(repos):
    duplicate = RepoConfig(name="extra", metalink="https://mirror.example.com/metalink", gpg_key=repos[0].gpg_key)
    assert gpg_keys([*repos, duplicate]) == [repos[0].gpg_key]


def test_curl_sources_merge_package_sets():
    first = [make_package("glibc"), make_package("nginx")]
    second = [make_package("nginx"), make_package("kernel")]

    sources = curl_sources([first, second])
    items = sources["org.osbuild.curl"]["items"]
    assert list(items) == ["sha256:glibc-1.0-1.fc35", "sha256:nginx-1.0-1.fc35", "sha256:kernel-1.0-1.fc35"]
    assert items["sha256:nginx-1.0-1.fc35"] == {"url": "https://mirror.example.com/nginx-1.0-1.fc35.x86_64.rpm"}


def test_curl_sources_empty_without_packages():
    assert curl_sources([]) == {}
    assert curl_sources([[], []]) == {}
