from __future__ import annotations

from manifestkit.stage_types import Stage, StageType

KIND_ID = "org.osbuild.anaconda"

BASE_KICKSTART_MODULES: tuple[str, ...] = (
    "org.fedoraproject.Anaconda.Modules.Network",
    "org.fedoraproject.Anaconda.Modules.Payloads",
    "org.fedoraproject.Anaconda.Modules.Storage",
)
USERS_KICKSTART_MODULE = "org.fedoraproject.Anaconda.Modules.Users"


def kickstart_modules(users: bool) -> list[str]:
    modules = list(BASE_KICKSTART_MODULES)
    if users:
        modules.append(USERS_KICKSTART_MODULE)
    return modules


def anaconda_stage(*, users: bool) -> Stage:
    return STAGE.stage({"kickstart-modules": kickstart_modules(users)})


STAGE = StageType(
    id=KIND_ID,
    doc="Enable the installer and select its kickstart modules.",
    source="image_composer.stages.installer.anaconda.anaconda_stage",
    tags=("installer",),
)
