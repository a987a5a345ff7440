from __future__ import annotations

from image_composer.stages.ostree.commit import STAGE as OSTREE_COMMIT
from image_composer.stages.ostree.init import STAGE as OSTREE_INIT
from image_composer.stages.ostree.pull import STAGE as OSTREE_PULL

__all_stages__ = [
    OSTREE_INIT,
    OSTREE_PULL,
    OSTREE_COMMIT,
]
