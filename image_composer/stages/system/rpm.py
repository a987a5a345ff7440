from __future__ import annotations

from collections.abc import Sequence

from image_composer.rpmmd import PackageSpec, RepoConfig, gpg_keys
from manifestkit.stage_types import Stage, StageType, source_input

KIND_ID = "org.osbuild.rpm"


def rpm_stage(repos: Sequence[RepoConfig], packages: Sequence[PackageSpec]) -> Stage:
    if not packages:
        raise ValueError(f"{KIND_ID} requires at least one package spec")

    options: dict[str, object] = {}
    keys = gpg_keys(repos)
    if keys:
        options["gpgkeys"] = keys

    checksums = [package.checksum for package in packages]
    return STAGE.stage(options, inputs={"packages": source_input("org.osbuild.files", checksums)})


STAGE = StageType(
    id=KIND_ID,
    doc="Install resolved packages from the manifest sources into the tree.",
    source="image_composer.stages.system.rpm.rpm_stage",
    tags=("system",),
    inputs=("packages",),
    required_inputs=("packages",),
)
