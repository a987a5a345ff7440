from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from manifestkit.stage_types import Stage, StageType

KIND_ID = "org.osbuild.nginx.conf"


@dataclass(frozen=True)
class NginxConfig:
    listen: str | None = None
    root: str | None = None
    daemon: bool | None = None
    pid: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.listen is not None:
            out["listen"] = self.listen
        if self.root is not None:
            out["root"] = self.root
        if self.daemon is not None:
            out["daemon"] = self.daemon
        if self.pid is not None:
            out["pid"] = self.pid
        return out


def nginx_conf_stage(path: str, config: NginxConfig) -> Stage:
    if not isinstance(path, str) or not path.startswith("/"):
        raise ValueError(f"{KIND_ID} path must be absolute (got {path!r})")
    return STAGE.stage({"path": path, "config": config.to_dict()})


STAGE = StageType(
    id=KIND_ID,
    doc="Write the main nginx configuration file.",
    source="image_composer.stages.server.nginx_conf.nginx_conf_stage",
    tags=("server",),
)
