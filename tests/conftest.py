import logging

import pytest

from image_composer.rpmmd import PackageSpec, RepoConfig


def make_package(name: str, version: str = "1.0", release: str = "1.fc35", arch: str = "x86_64") -> PackageSpec:
    return PackageSpec(
        name=name,
        epoch=0,
        version=version,
        release=release,
        arch=arch,
        remote_location=f"https://mirror.example.com/{name}-{version}-{release}.{arch}.rpm",
        checksum=f"sha256:{name}-{version}-{release}",
    )


@pytest.fixture
def repos() -> list[RepoConfig]:
    return [
        RepoConfig(
            name="fedora",
            baseurl="https://mirror.example.com/fedora/35/x86_64/os",
            gpg_key="-----BEGIN PGP PUBLIC KEY BLOCK-----fedora",
            check_gpg=True,
        ),
        RepoConfig(name="updates", baseurl="https://mirror.example.com/fedora/35/x86_64/updates"),
    ]


@pytest.fixture
def installer_packages() -> list[PackageSpec]:
    return [
        make_package("anaconda", version="35.22"),
        make_package("kernel", version="5.14.10", release="300.fc35"),
        make_package("lorax-templates-generic", version="35.1"),
    ]


@pytest.fixture
def container_packages() -> list[PackageSpec]:
    return [make_package("nginx", version="1.20.1"), make_package("glibc", version="2.34")]


@pytest.fixture(autouse=True)
def _reset_operational_loggers():
    yield
    for name in ("image_composer", "manifestkit"):
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.propagate = True
        logger.setLevel(logging.NOTSET)


def _package_entry(name: str, version: str = "1.0", release: str = "1.fc35") -> dict:
    package = make_package(name, version=version, release=release)
    return {
        "name": package.name,
        "epoch": package.epoch,
        "version": package.version,
        "release": package.release,
        "arch": package.arch,
        "remote_location": package.remote_location,
        "checksum": package.checksum,
    }


def request_data(image_type: str, **options) -> dict:
    """A complete build request mapping carrying every package set the image types use."""

    return {
        "image_type": image_type,
        "arch": "x86_64",
        "distro": {"product": "Fedora", "version": "35", "runner": "org.osbuild.fedora35"},
        "repos": [
            {
                "name": "fedora",
                "baseurl": "https://mirror.example.com/fedora/35/x86_64/os",
                "gpgkey": "-----BEGIN PGP PUBLIC KEY BLOCK-----fedora",
                "check_gpg": True,
            }
        ],
        "package_sets": {
            "build": [_package_entry("coreutils"), _package_entry("glibc")],
            "os": [_package_entry("glibc"), _package_entry("systemd", version="249")],
            "container": [_package_entry("nginx", version="1.20.1"), _package_entry("glibc")],
            "installer": [
                _package_entry("anaconda", version="35.22"),
                _package_entry("kernel", version="5.14.10", release="300.fc35"),
            ],
        },
        "options": dict(options),
    }
