"""Resolved repository and package metadata supplied by the depsolver.

Nothing here resolves dependencies; these are the read-only inputs pipelines are
built from.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


class PackageNotFoundError(ValueError):
    """A package a pipeline cannot be built without is missing from the resolved set."""

    def __init__(self, package_name: str, *, context: str | None = None) -> None:
        self.package_name = package_name
        message = f"Package {package_name!r} not found in the resolved package specs"
        if context:
            message = f"{context}: {message}"
        super().__init__(message)


@dataclass(frozen=True)
class RepoConfig:
    name: str
    baseurl: str | None = None
    metalink: str | None = None
    gpg_key: str | None = None
    check_gpg: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("RepoConfig.name must be a non-empty string")
        if not self.baseurl and not self.metalink:
            raise ValueError(f"Repository {self.name} needs a baseurl or a metalink")
        if self.check_gpg and not self.gpg_key:
            raise ValueError(f"Repository {self.name} sets check_gpg without a gpg_key")


@dataclass(frozen=True)
class PackageSpec:
    name: str
    epoch: int
    version: str
    release: str
    arch: str
    remote_location: str
    checksum: str

    def __post_init__(self) -> None:
        for label in ("name", "version", "release", "arch", "remote_location", "checksum"):
            value = getattr(self, label)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"PackageSpec.{label} must be a non-empty string (package={self.name!r})")
        if isinstance(self.epoch, bool) or not isinstance(self.epoch, int) or self.epoch < 0:
            raise ValueError(f"PackageSpec.epoch must be a non-negative int (package={self.name!r})")
        if ":" not in self.checksum:
            raise ValueError(
                f"PackageSpec.checksum must be '<algorithm>:<hex>' (package={self.name!r}, got {self.checksum!r})"
            )

    @property
    def ver_str(self) -> str:
        return f"{self.version}-{self.release}.{self.arch}"


def find_package_spec(packages: Iterable[PackageSpec], package_name: str) -> PackageSpec | None:
    for package in packages:
        if package.name == package_name:
            return package
    return None


def get_ver_str_from_package_specs(
    packages: Iterable[PackageSpec], package_name: str, *, context: str | None = None
) -> str:
    """Return ``<version>-<release>.<arch>`` of the named package.

    Raises `PackageNotFoundError` when the package is absent; there is no default.
    """

    package = find_package_spec(packages, package_name)
    if package is None:
        raise PackageNotFoundError(package_name, context=context)
    return package.ver_str


def gpg_keys(repos: Iterable[RepoConfig]) -> list[str]:
    keys: list[str] = []
    for repo in repos:
        if repo.gpg_key and repo.gpg_key not in keys:
            keys.append(repo.gpg_key)
    return keys


def curl_sources(package_sets: Iterable[Iterable[PackageSpec]]) -> dict[str, dict[str, object]]:
    """Build the `org.osbuild.curl` source section that backs rpm stage inputs."""

    items: dict[str, dict[str, str]] = {}
    for packages in package_sets:
        for package in packages:
            items.setdefault(package.checksum, {"url": package.remote_location})
    if not items:
        return {}
    return {"org.osbuild.curl": {"items": items}}
