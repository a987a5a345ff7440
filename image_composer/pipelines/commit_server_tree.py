from __future__ import annotations

import posixpath
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from image_composer.rpmmd import PackageNotFoundError, PackageSpec, RepoConfig, find_package_spec
from image_composer.stages.ostree.init import ostree_init_stage
from image_composer.stages.ostree.pull import ostree_pull_stage
from image_composer.stages.server.nginx_conf import NginxConfig, nginx_conf_stage
from image_composer.stages.system.chmod import chmod_stage
from image_composer.stages.system.locale import locale_stage
from image_composer.stages.system.rpm import rpm_stage
from manifestkit.pipeline import NamedPipeline, Pipeline, SerializedPipeline, validate_pipeline_name
from manifestkit.stage_types import NAME_PREFIX, PipelineRef

DEFAULT_NAME = "container-tree"

LANGUAGE = "en_US"
SERVER_PACKAGE = "nginx"
HTML_ROOT = "/usr/share/nginx/html"
REPO_PATH = posixpath.join(HTML_ROOT, "repo")
NGINX_PID_PATH = "/tmp/nginx.pid"
# nginx runs unprivileged in the container and must write its logs and state here.
WRITABLE_DIRS: tuple[str, ...] = ("/var/log/nginx", "/var/lib/nginx")
WRITABLE_MODE = "a+rwX"


class CommitSource(Protocol):
    @property
    def name(self) -> str:
        ...

    @property
    def ref(self) -> str | None:
        ...


def parse_listen_port(value: Any, *, path: str = "listen_port") -> str:
    if isinstance(value, bool):
        raise TypeError(f"{path} must be an int or a string of digits (type=bool)")
    if isinstance(value, int):
        port = value
    elif isinstance(value, str) and value.strip().isdigit():
        port = int(value.strip())
    else:
        raise ValueError(f"{path} must be a port number (got {value!r})")
    if not 1 <= port <= 65535:
        raise ValueError(f"{path} must be between 1 and 65535 (got {port})")
    return str(port)


@dataclass(frozen=True)
class CommitServerTreePipeline:
    """An nginx tree serving an embedded ostree commit.

    `packages` must contain nginx. `commit` is the pipeline producing the commit;
    it is referenced by name and ref, never embedded.
    """

    build: NamedPipeline | None
    repos: Sequence[RepoConfig]
    packages: Sequence[PackageSpec]
    commit: CommitSource
    nginx_config_path: str
    listen_port: str | int
    name: str = DEFAULT_NAME
    ref: str | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", validate_pipeline_name(self.name))
        object.__setattr__(self, "repos", tuple(self.repos))
        object.__setattr__(self, "packages", tuple(self.packages))
        if find_package_spec(self.packages, SERVER_PACKAGE) is None:
            raise PackageNotFoundError(SERVER_PACKAGE, context=f"Pipeline {self.name} web server")

        validate_pipeline_name(getattr(self.commit, "name", None), label=f"Pipeline {self.name} commit name")
        commit_ref = getattr(self.commit, "ref", None)
        if not isinstance(commit_ref, str) or not commit_ref.strip():
            raise ValueError(f"Pipeline {self.name} commit pipeline {self.commit.name} has no ref")

        if not isinstance(self.nginx_config_path, str) or not posixpath.isabs(self.nginx_config_path):
            raise ValueError(
                f"Pipeline {self.name} nginx_config_path must be an absolute path (got {self.nginx_config_path!r})"
            )
        object.__setattr__(
            self, "listen_port", parse_listen_port(self.listen_port, path=f"Pipeline {self.name} listen_port")
        )

    def serialize(self) -> SerializedPipeline:
        pipeline = Pipeline(self.name, build=self.build)

        pipeline.add_stage(rpm_stage(self.repos, self.packages))
        pipeline.add_stage(locale_stage(LANGUAGE))
        pipeline.add_stage(ostree_init_stage(REPO_PATH))
        pipeline.add_stage(
            ostree_pull_stage(
                REPO_PATH,
                commits=PipelineRef(NAME_PREFIX + self.commit.name, self.commit.ref),
            )
        )
        for path in WRITABLE_DIRS:
            pipeline.add_stage(chmod_stage(path, WRITABLE_MODE, recursive=True))
        pipeline.add_stage(nginx_conf_stage(self.nginx_config_path, self._nginx_config()))

        return pipeline.serialize()

    def _nginx_config(self) -> NginxConfig:
        # Foreground, with the pid file outside the directories made writable above.
        return NginxConfig(
            listen=self.listen_port,
            root=HTML_ROOT,
            daemon=False,
            pid=NGINX_PID_PATH,
        )
