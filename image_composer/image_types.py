"""Named image types: which pipelines make up an artifact and how they reference each other."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from image_composer.pipelines import (
    AnacondaTreePipeline,
    BuildPipeline,
    CommitServerTreePipeline,
    LiveImgPipeline,
    OSPipeline,
    OSTreeCommitPipeline,
    QCOW2Pipeline,
)
from image_composer.pipelines.commit_server_tree import parse_listen_port
from image_composer.request import ComposeRequest
from manifestkit.config_namespace import ConfigNamespace
from manifestkit.pipeline import ManifestPipeline

DEFAULT_IMAGE_SIZE = 4 * 1024 * 1024 * 1024


@dataclass(frozen=True)
class ImageTypePipelines:
    """The export pipeline and the full pipeline pool of one build request."""

    export: ManifestPipeline
    pipelines: tuple[ManifestPipeline, ...]


class ImageType(Protocol):
    name: str
    doc: str

    def pipelines(self, request: ComposeRequest, options: ConfigNamespace) -> ImageTypePipelines:
        ...


_IMAGE_TYPES: dict[str, type[ImageType]] = {}


def register_image_type(cls: type[ImageType]) -> type[ImageType]:
    name = getattr(cls, "name", None)
    if not isinstance(name, str) or not name.strip():
        raise TypeError("Image type must define a non-empty 'name' attribute")

    key = name.strip().lower()
    if key in _IMAGE_TYPES:
        raise ValueError(f"Duplicate image type name: {key}")

    _IMAGE_TYPES[key] = cls
    return cls


class ImageTypeManager:
    @classmethod
    def get(cls, name: str) -> ImageType:
        key = (name or "").strip().lower()
        image_type_cls = _IMAGE_TYPES.get(key)
        if image_type_cls is None:
            available = ", ".join(sorted(_IMAGE_TYPES.keys())) or "<none>"
            raise ValueError(f"Unknown image type: {name or '<empty>'} (available: {available})")
        return image_type_cls()

    @classmethod
    def available(cls) -> tuple[str, ...]:
        return tuple(sorted(_IMAGE_TYPES.keys()))

    @classmethod
    def build(cls, request: ComposeRequest) -> ImageTypePipelines:
        image_type = cls.get(request.image_type)
        options = ConfigNamespace(request.options, path="options")
        result = image_type.pipelines(request, options)
        options.assert_consumed()
        return result


def _build_pipeline(request: ComposeRequest) -> BuildPipeline:
    return BuildPipeline(
        runner=request.distro.runner,
        repos=request.repos,
        packages=request.package_set("build"),
    )


def _os_pipeline(request: ComposeRequest, build: BuildPipeline) -> OSPipeline:
    return OSPipeline(build=build, repos=request.repos, packages=request.package_set("os"))


def _ostree_ref(request: ComposeRequest, options: ConfigNamespace) -> str:
    default_ref = f"{request.distro.product.lower()}/{request.distro.version}/{request.arch}/edge"
    return options.get_str("ostree_ref", default=default_ref)  # type: ignore[return-value]


@register_image_type
class QCOW2ImageType:
    name = "qcow2"
    doc = "Bootable qcow2 disk image of the OS tree."

    def pipelines(self, request: ComposeRequest, options: ConfigNamespace) -> ImageTypePipelines:
        size = options.get_int("size", default=DEFAULT_IMAGE_SIZE, min_value=1024 * 1024)
        compat = options.get_str("compat", default=None)
        filename = options.get_str("filename", default="disk.qcow2")

        build = _build_pipeline(request)
        tree = _os_pipeline(request, build)
        image = LiveImgPipeline(build=build, tree=tree, size=size)
        qcow2 = QCOW2Pipeline(build=build, image=image, filename=filename, compat=compat)  # type: ignore[arg-type]
        return ImageTypePipelines(export=qcow2, pipelines=(build, tree, image, qcow2))


@register_image_type
class EdgeCommitImageType:
    name = "edge-commit"
    doc = "OSTree commit of the OS tree in an archive repository."

    def pipelines(self, request: ComposeRequest, options: ConfigNamespace) -> ImageTypePipelines:
        ref = _ostree_ref(request, options)
        parent = options.get_str("parent", default=None)

        build = _build_pipeline(request)
        tree = _os_pipeline(request, build)
        commit = OSTreeCommitPipeline(
            build=build, tree=tree, ref=ref, os_version=request.distro.version, parent=parent
        )
        return ImageTypePipelines(export=commit, pipelines=(build, tree, commit))


@register_image_type
class EdgeContainerImageType:
    name = "edge-container"
    doc = "Container tree running nginx that serves an embedded OSTree commit."

    def pipelines(self, request: ComposeRequest, options: ConfigNamespace) -> ImageTypePipelines:
        ref = _ostree_ref(request, options)
        parent = options.get_str("parent", default=None)
        listen_port = parse_listen_port(
            options.get_scalar("listen_port", default=8080), path="options.listen_port"
        )
        nginx_config_path = options.get_str("nginx_config_path", default="/etc/nginx.conf")

        build = _build_pipeline(request)
        tree = _os_pipeline(request, build)
        commit = OSTreeCommitPipeline(
            build=build, tree=tree, ref=ref, os_version=request.distro.version, parent=parent
        )
        container = CommitServerTreePipeline(
            build=build,
            repos=request.repos,
            packages=request.package_set("container"),
            commit=commit,
            nginx_config_path=nginx_config_path,  # type: ignore[arg-type]
            listen_port=listen_port,
        )
        return ImageTypePipelines(export=container, pipelines=(build, tree, commit, container))


@register_image_type
class EdgeInstallerImageType:
    name = "edge-installer"
    doc = "Installer root filesystem tree."

    def pipelines(self, request: ComposeRequest, options: ConfigNamespace) -> ImageTypePipelines:
        kernel_name = options.get_str("kernel_name", default="kernel")
        users = options.get_bool("users", default=False)
        biosdevname = options.get_bool("biosdevname", default=request.arch == "x86_64")

        build = _build_pipeline(request)
        installer = AnacondaTreePipeline(
            build=build,
            repos=request.repos,
            packages=request.package_set("installer"),
            kernel_name=kernel_name,  # type: ignore[arg-type]
            arch=request.arch,
            product=request.distro.product,
            version=request.distro.version,
            users=users,
            biosdevname=biosdevname,
            variant=request.distro.variant,
        )
        return ImageTypePipelines(export=installer, pipelines=(build, installer))


def list_image_types() -> None:
    for name in ImageTypeManager.available():
        doc = getattr(_IMAGE_TYPES[name], "doc", "") or ""
        print(f"{name}\t{doc}")
