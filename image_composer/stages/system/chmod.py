from __future__ import annotations

import re

from manifestkit.stage_types import Stage, StageType

KIND_ID = "org.osbuild.chmod"

_SYMBOLIC_MODE = re.compile(r"^[ugoa]*[-+=][rwxXst]*(,[ugoa]*[-+=][rwxXst]*)*$")
_OCTAL_MODE = re.compile(r"^[0-7]{3,4}$")


def chmod_stage(path: str, mode: str, *, recursive: bool = False) -> Stage:
    if not isinstance(path, str) or not path.startswith("/"):
        raise ValueError(f"{KIND_ID} path must be absolute (got {path!r})")
    if not isinstance(mode, str) or not (_SYMBOLIC_MODE.match(mode) or _OCTAL_MODE.match(mode)):
        raise ValueError(f"{KIND_ID} mode must be a chmod mode string (got {mode!r})")
    return STAGE.stage({"items": {path: {"mode": mode, "recursive": recursive}}})


STAGE = StageType(
    id=KIND_ID,
    doc="Change file mode bits of paths in the tree.",
    source="image_composer.stages.system.chmod.chmod_stage",
    tags=("system",),
)
