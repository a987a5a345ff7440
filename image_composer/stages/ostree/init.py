from __future__ import annotations

from typing import Literal

from manifestkit.stage_types import Stage, StageType

KIND_ID = "org.osbuild.ostree.init"

RepoMode = Literal["archive", "bare", "bare-user", "bare-user-only"]
REPO_MODES: tuple[str, ...] = ("archive", "bare", "bare-user", "bare-user-only")


def ostree_init_stage(path: str, *, mode: RepoMode | None = None) -> Stage:
    if not isinstance(path, str) or not path.startswith("/"):
        raise ValueError(f"{KIND_ID} path must be absolute (got {path!r})")
    options: dict[str, str] = {"path": path}
    if mode is not None:
        if mode not in REPO_MODES:
            raise ValueError(f"{KIND_ID} mode must be one of: {', '.join(REPO_MODES)} (got {mode!r})")
        options["mode"] = mode
    return STAGE.stage(options)


STAGE = StageType(
    id=KIND_ID,
    doc="Create an empty ostree repository.",
    source="image_composer.stages.ostree.init.ostree_init_stage",
    tags=("ostree",),
)
