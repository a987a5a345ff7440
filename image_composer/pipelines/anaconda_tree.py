"""The installer root filesystem tree, as found on an installer ISO."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from image_composer.rpmmd import PackageSpec, RepoConfig, get_ver_str_from_package_specs
from image_composer.stages.installer.anaconda import anaconda_stage
from image_composer.stages.installer.buildstamp import buildstamp_stage
from image_composer.stages.installer.dracut import dracut_stage
from image_composer.stages.installer.lorax_script import lorax_script_stage
from image_composer.stages.system.locale import locale_stage
from image_composer.stages.system.rpm import rpm_stage
from image_composer.stages.system.selinux_config import selinux_config_stage
from image_composer.stages.system.users import UserOptions, users_stage
from manifestkit.pipeline import NamedPipeline, Pipeline, SerializedPipeline, validate_pipeline_name
from manifestkit.stage_types import Stage

DEFAULT_NAME = "anaconda-tree"

LANGUAGE = "en_US.UTF-8"
SELINUX_STATE = "permissive"
POSTINSTALL_TEMPLATE = "99-generic/runtime-postinstall.tmpl"
BUILDSTAMP_PATH = "/.buildstamp"

# Empty password: the account is locked.
ROOT_USER = UserOptions(password="")
INSTALL_USER = UserOptions(
    uid=0,
    gid=0,
    home="/root",
    shell="/usr/libexec/anaconda/run-anaconda",
    password="",
)

DRACUT_BASE_MODULES: tuple[str, ...] = (
    "bash",
    "systemd",
    "fips",
    "systemd-initrd",
    "modsign",
    "nss-softokn",
    "i18n",
    "convertfs",
    "network-manager",
    "network",
    "ifcfg",
    "url-lib",
    "drm",
    "plymouth",
    "crypt",
    "dm",
    "dmsquash-live",
    "kernel-modules",
    "kernel-modules-extra",
    "kernel-network-modules",
    "livenet",
    "lvm",
    "mdraid",
    "qemu",
    "qemu-net",
    "resume",
    "rootfs-block",
    "terminfo",
    "udev-rules",
    "dracut-systemd",
    "pollcdrom",
    "usrmount",
    "base",
    "fs-lib",
    "img-lib",
    "shutdown",
    "uefi-lib",
)
DRACUT_BIOSDEVNAME_MODULE = "biosdevname"
DRACUT_INSTALLER_MODULES: tuple[str, ...] = (
    "anaconda",
    "rdma",
    "rngd",
    "multipath",
    "fcoe",
    "fcoe-uefi",
    "iscsi",
    "lunmask",
    "nfs",
)


def dracut_modules(*, biosdevname: bool, additional: Sequence[str] = DRACUT_INSTALLER_MODULES) -> list[str]:
    """Base modules, then biosdevname when requested, then `additional`. Order is kept as is."""

    modules = list(DRACUT_BASE_MODULES)
    if biosdevname:
        modules.append(DRACUT_BIOSDEVNAME_MODULE)
    modules.extend(additional)
    return modules


@dataclass(frozen=True)
class AnacondaTreePipeline:
    """Installer tree built from `packages`, which must contain the kernel package.

    `repos` and `packages` are the content of the installer itself, not what it
    installs on the target system. `users` enables the users kickstart module, so
    kickstart users are configured or prompted for at install time. `biosdevname`
    adds biosdevname network device naming to the installer initramfs.
    """

    build: NamedPipeline | None
    repos: Sequence[RepoConfig]
    packages: Sequence[PackageSpec]
    kernel_name: str
    arch: str
    product: str
    version: str
    users: bool = False
    biosdevname: bool = False
    variant: str | None = None
    name: str = DEFAULT_NAME
    ref: str | None = field(default=None, init=False)
    kernel_ver: str = field(default="", init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", validate_pipeline_name(self.name))
        for label in ("kernel_name", "arch", "product", "version"):
            value = getattr(self, label)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"Pipeline {self.name} {label} must be a non-empty string")
        if not isinstance(self.users, bool) or not isinstance(self.biosdevname, bool):
            raise TypeError(f"Pipeline {self.name} users/biosdevname must be booleans")
        object.__setattr__(self, "repos", tuple(self.repos))
        object.__setattr__(self, "packages", tuple(self.packages))

        kernel_ver = get_ver_str_from_package_specs(
            self.packages, self.kernel_name, context=f"Pipeline {self.name} kernel"
        )
        object.__setattr__(self, "kernel_ver", kernel_ver)

    def serialize(self) -> SerializedPipeline:
        pipeline = Pipeline(self.name, build=self.build)

        pipeline.add_stage(rpm_stage(self.repos, self.packages))
        pipeline.add_stage(
            buildstamp_stage(
                arch=self.arch,
                product=self.product,
                version=self.version,
                variant=self.variant,
                final=True,
            )
        )
        pipeline.add_stage(locale_stage(LANGUAGE))
        pipeline.add_stage(users_stage({"root": ROOT_USER, "install": INSTALL_USER}))
        pipeline.add_stage(anaconda_stage(users=self.users))
        pipeline.add_stage(lorax_script_stage(POSTINSTALL_TEMPLATE, basearch=self.arch))
        pipeline.add_stage(self._dracut_stage())
        pipeline.add_stage(selinux_config_stage(SELINUX_STATE))

        return pipeline.serialize()

    def _dracut_stage(self) -> Stage:
        return dracut_stage(
            [self.kernel_ver],
            modules=dracut_modules(biosdevname=self.biosdevname),
            install=[BUILDSTAMP_PATH],
        )
