from __future__ import annotations

from image_composer.stages.installer.anaconda import STAGE as ANACONDA
from image_composer.stages.installer.buildstamp import STAGE as BUILDSTAMP
from image_composer.stages.installer.dracut import STAGE as DRACUT
from image_composer.stages.installer.lorax_script import STAGE as LORAX_SCRIPT

__all_stages__ = [
    BUILDSTAMP,
    ANACONDA,
    LORAX_SCRIPT,
    DRACUT,
]
