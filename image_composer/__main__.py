from __future__ import annotations

import sys

from image_composer.cli import main

raise SystemExit(main(sys.argv[1:]))
