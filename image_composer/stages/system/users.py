from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from manifestkit.stage_types import Stage, StageType

KIND_ID = "org.osbuild.users"


@dataclass(frozen=True)
class UserOptions:
    """Account settings; fields left as None are not written."""

    uid: int | None = None
    gid: int | None = None
    home: str | None = None
    shell: str | None = None
    password: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.uid is not None:
            out["uid"] = self.uid
        if self.gid is not None:
            out["gid"] = self.gid
        if self.home is not None:
            out["home"] = self.home
        if self.shell is not None:
            out["shell"] = self.shell
        if self.password is not None:
            out["password"] = self.password
        return out


def users_stage(users: Mapping[str, UserOptions]) -> Stage:
    if not users:
        raise ValueError(f"{KIND_ID} requires at least one user")
    return STAGE.stage({"users": {name: user.to_dict() for name, user in users.items()}})


STAGE = StageType(
    id=KIND_ID,
    doc="Create or modify user accounts.",
    source="image_composer.stages.system.users.users_stage",
    tags=("system",),
)
