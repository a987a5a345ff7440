from __future__ import annotations

from image_composer.stages.image.copy import STAGE as COPY
from image_composer.stages.image.qemu import STAGE as QEMU
from image_composer.stages.image.truncate import STAGE as TRUNCATE

__all_stages__ = [
    TRUNCATE,
    COPY,
    QEMU,
]
