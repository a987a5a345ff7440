from __future__ import annotations

from collections.abc import Sequence

from manifestkit.stage_types import Stage, StageType

KIND_ID = "org.osbuild.dracut"


def dracut_stage(
    kernel: Sequence[str],
    *,
    modules: Sequence[str],
    install: Sequence[str] = (),
) -> Stage:
    if not kernel:
        raise ValueError(f"{KIND_ID} requires at least one kernel version")
    for idx, item in enumerate(kernel):
        if not isinstance(item, str) or not item.strip():
            raise ValueError(f"{KIND_ID} kernel[{idx}] must be a non-empty string")

    options: dict[str, object] = {"kernel": list(kernel), "modules": list(modules)}
    if install:
        options["install"] = list(install)
    return STAGE.stage(options)


STAGE = StageType(
    id=KIND_ID,
    doc="Generate an initramfs for the given kernels with an explicit module list.",
    source="image_composer.stages.installer.dracut.dracut_stage",
    tags=("installer", "boot"),
)
