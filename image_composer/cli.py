from __future__ import annotations

import argparse
import sys
import uuid
from collections.abc import Sequence


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="image-composer", add_help=True)
    sub = parser.add_subparsers(dest="command", required=True)

    compose = sub.add_parser("compose", help="Compile a build request into a manifest")
    compose.add_argument(
        "--request",
        default=None,
        help="Build request YAML (default: $IMAGE_COMPOSER_REQUEST).",
    )
    compose.add_argument(
        "--overlay",
        action="append",
        default=[],
        help="YAML file deep-merged over the request; may be repeated.",
    )
    compose.add_argument("--output", default=None, help="Write the manifest here instead of stdout.")
    compose.add_argument("--log-dir", default=None, help="Also write a DEBUG operational log here.")

    sub.add_parser("list-stages", help="List known stage types")
    sub.add_parser("list-image-types", help="List available image types")

    return parser


def _run_compose(args: argparse.Namespace) -> int:
    from .compose import compose
    from .foundation.config_io import load_request
    from .foundation.logging_utils import setup_operational_logger
    from .request import ComposeRequest

    compose_id = uuid.uuid4().hex[:12]
    logger, _log_file = setup_operational_logger(args.log_dir, compose_id)

    try:
        raw, meta = load_request(args.request, overlays=args.overlay)
        logger.info("Loaded request (%s): %s", meta["mode"], ", ".join(meta["paths"]))
        result = compose(ComposeRequest.from_dict(raw))
    except (FileNotFoundError, ValueError, TypeError) as exc:
        logger.error("Compose failed: %s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 2

    document = result.manifest.to_json()
    if args.output:
        with open(args.output, "w", encoding="utf-8") as handle:
            handle.write(document)
            handle.write("\n")
        logger.info("Wrote manifest for %s to %s", result.export, args.output)
    else:
        print(document)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(list(argv) if argv is not None else None)

    if args.command == "compose":
        return _run_compose(args)

    if args.command == "list-stages":
        from .stages.registry import list_stages

        list_stages()
        return 0

    if args.command == "list-image-types":
        from .image_types import list_image_types

        list_image_types()
        return 0

    raise AssertionError(f"Unhandled command: {args.command}")


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main(sys.argv[1:]))
