"""Build request: what to compose, from which already-resolved content."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from image_composer.rpmmd import PackageSpec, RepoConfig
from manifestkit.config_namespace import ConfigNamespace

DEFAULT_ARCH = "x86_64"
SUPPORTED_ARCHES: tuple[str, ...] = ("x86_64", "aarch64", "ppc64le", "s390x")


@dataclass(frozen=True)
class DistroConfig:
    product: str
    version: str
    runner: str
    variant: str | None = None


@dataclass(frozen=True)
class ComposeRequest:
    image_type: str
    arch: str
    distro: DistroConfig
    repos: tuple[RepoConfig, ...]
    package_sets: dict[str, tuple[PackageSpec, ...]]
    options: dict[str, Any] = field(default_factory=dict)

    def package_set(self, name: str) -> tuple[PackageSpec, ...]:
        packages = self.package_sets.get(name)
        if not packages:
            available = ", ".join(sorted(self.package_sets)) or "<none>"
            raise ValueError(
                f"image_type={self.image_type} requires package_sets.{name} (available: {available})"
            )
        return packages

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "ComposeRequest":
        root = ConfigNamespace(raw, path="")

        image_type = root.get_str("image_type")
        arch = root.get_str("arch", default=DEFAULT_ARCH, choices=SUPPORTED_ARCHES)

        distro_ns = root.namespace("distro")
        distro = DistroConfig(
            product=distro_ns.get_str("product"),  # type: ignore[arg-type]
            version=distro_ns.get_str("version"),  # type: ignore[arg-type]
            runner=distro_ns.get_str("runner"),  # type: ignore[arg-type]
            variant=distro_ns.get_str("variant", default=None),
        )

        repos: list[RepoConfig] = []
        for repo_ns in root.get_list_mapping("repos"):
            repos.append(_parse_repo(repo_ns))
        names = [repo.name for repo in repos]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate repository name in repos: {duplicates[0]}")

        sets_ns = root.namespace("package_sets")
        package_sets: dict[str, tuple[PackageSpec, ...]] = {}
        for set_name in sets_ns.keys():
            package_sets[set_name] = tuple(
                _parse_package(package_ns) for package_ns in sets_ns.get_list_mapping(set_name)
            )

        # Image types parse and enforce their own option keys.
        options = root.get_mapping("options", default={})

        root.assert_consumed()

        return cls(
            image_type=image_type,  # type: ignore[arg-type]
            arch=arch,  # type: ignore[arg-type]
            distro=distro,
            repos=tuple(repos),
            package_sets=package_sets,
            options=options,
        )


def _parse_repo(ns: ConfigNamespace) -> RepoConfig:
    repo = RepoConfig(
        name=ns.get_str("name"),  # type: ignore[arg-type]
        baseurl=ns.get_str("baseurl", default=None),
        metalink=ns.get_str("metalink", default=None),
        gpg_key=ns.get_str("gpgkey", default=None),
        check_gpg=ns.get_bool("check_gpg", default=False),
    )
    ns.assert_consumed()
    return repo


def _parse_package(ns: ConfigNamespace) -> PackageSpec:
    package = PackageSpec(
        name=ns.get_str("name"),  # type: ignore[arg-type]
        epoch=ns.get_int("epoch", default=0, min_value=0),
        version=ns.get_str("version"),  # type: ignore[arg-type]
        release=ns.get_str("release"),  # type: ignore[arg-type]
        arch=ns.get_str("arch"),  # type: ignore[arg-type]
        remote_location=ns.get_str("remote_location"),  # type: ignore[arg-type]
        checksum=ns.get_str("checksum"),  # type: ignore[arg-type]
    )
    ns.assert_consumed()
    return package
