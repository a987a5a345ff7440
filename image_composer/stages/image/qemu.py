from __future__ import annotations

from typing import Literal

from manifestkit.stage_types import PipelineFileRef, Stage, StageType, pipeline_input

KIND_ID = "org.osbuild.qemu"

ImageFormat = Literal["qcow2", "vdi", "vmdk", "vpc", "vhdx"]
IMAGE_FORMATS: tuple[str, ...] = ("qcow2", "vdi", "vmdk", "vpc", "vhdx")
QCOW2_COMPAT_LEVELS: tuple[str, ...] = ("0.10", "1.1")


def qemu_stage(
    filename: str,
    *,
    image: PipelineFileRef,
    format: ImageFormat,
    compat: str | None = None,
) -> Stage:
    if not isinstance(filename, str) or not filename.strip() or "/" in filename:
        raise ValueError(f"{KIND_ID} filename must be a plain file name (got {filename!r})")
    if not isinstance(image, PipelineFileRef):
        raise TypeError(f"{KIND_ID} image must be a PipelineFileRef (type={type(image).__name__})")
    if format not in IMAGE_FORMATS:
        raise ValueError(f"{KIND_ID} format must be one of: {', '.join(IMAGE_FORMATS)} (got {format!r})")

    format_options: dict[str, str] = {"type": format}
    if compat:
        if format != "qcow2":
            raise ValueError(f"{KIND_ID} compat is only valid for qcow2 (format={format})")
        if compat not in QCOW2_COMPAT_LEVELS:
            raise ValueError(
                f"{KIND_ID} compat must be one of: {', '.join(QCOW2_COMPAT_LEVELS)} (got {compat!r})"
            )
        format_options["compat"] = compat

    return STAGE.stage(
        {"filename": filename, "format": format_options},
        inputs={"image": pipeline_input("org.osbuild.files", image)},
    )


STAGE = StageType(
    id=KIND_ID,
    doc="Convert a raw disk image produced by another pipeline to a target format.",
    source="image_composer.stages.image.qemu.qemu_stage",
    tags=("image",),
    inputs=("image",),
    required_inputs=("image",),
)
