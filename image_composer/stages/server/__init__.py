from __future__ import annotations

from image_composer.stages.server.nginx_conf import STAGE as NGINX_CONF

__all_stages__ = [
    NGINX_CONF,
]
