from __future__ import annotations

from manifestkit.stage_types import Stage, StageType

KIND_ID = "org.osbuild.buildstamp"


def buildstamp_stage(
    *,
    arch: str,
    product: str,
    version: str,
    final: bool,
    variant: str | None = None,
) -> Stage:
    for label, value in (("arch", arch), ("product", product), ("version", version)):
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"{KIND_ID} {label} must be a non-empty string")

    options: dict[str, object] = {
        "arch": arch,
        "product": product,
        "version": version,
        "final": final,
    }
    if variant:
        options["variant"] = variant
    return STAGE.stage(options)


STAGE = StageType(
    id=KIND_ID,
    doc="Write the /.buildstamp product metadata read by the installer.",
    source="image_composer.stages.installer.buildstamp.buildstamp_stage",
    tags=("installer",),
)
