from __future__ import annotations

from typing import Literal

from manifestkit.stage_types import Stage, StageType

KIND_ID = "org.osbuild.selinux.config"

SELinuxState = Literal["enforcing", "permissive", "disabled"]
SELINUX_STATES: tuple[str, ...] = ("enforcing", "permissive", "disabled")


def selinux_config_stage(state: SELinuxState) -> Stage:
    if state not in SELINUX_STATES:
        raise ValueError(f"{KIND_ID} state must be one of: {', '.join(SELINUX_STATES)} (got {state!r})")
    return STAGE.stage({"state": state})


STAGE = StageType(
    id=KIND_ID,
    doc="Write the SELinux mode to /etc/selinux/config.",
    source="image_composer.stages.system.selinux_config.selinux_config_stage",
    tags=("system",),
)
