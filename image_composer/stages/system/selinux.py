from __future__ import annotations

from manifestkit.stage_types import Stage, StageType

KIND_ID = "org.osbuild.selinux"

DEFAULT_FILE_CONTEXTS = "etc/selinux/targeted/contexts/files/file_contexts"


def selinux_stage(file_contexts: str = DEFAULT_FILE_CONTEXTS, *, labels: dict[str, str] | None = None) -> Stage:
    options: dict[str, object] = {"file_contexts": file_contexts}
    if labels:
        options["labels"] = dict(labels)
    return STAGE.stage(options)


STAGE = StageType(
    id=KIND_ID,
    doc="Label the tree according to the SELinux file contexts.",
    source="image_composer.stages.system.selinux.selinux_stage",
    tags=("system",),
)
