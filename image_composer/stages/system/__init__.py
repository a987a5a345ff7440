from __future__ import annotations

from image_composer.stages.system.chmod import STAGE as CHMOD
from image_composer.stages.system.locale import STAGE as LOCALE
from image_composer.stages.system.rpm import STAGE as RPM
from image_composer.stages.system.selinux import STAGE as SELINUX
from image_composer.stages.system.selinux_config import STAGE as SELINUX_CONFIG
from image_composer.stages.system.users import STAGE as USERS

__all_stages__ = [
    RPM,
    LOCALE,
    USERS,
    SELINUX,
    SELINUX_CONFIG,
    CHMOD,
]
