"""Build request files: YAML on disk, optionally layered with overlay files."""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from typing import Any

import yaml

REQUEST_ENV_VAR = "IMAGE_COMPOSER_REQUEST"


def _read_yaml_mapping(path: str) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as handle:
        try:
            payload = yaml.safe_load(handle)
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise ValueError(f"Request file must contain a YAML mapping: {path}")
    return dict(payload)


def _shape(value: Any) -> str:
    if isinstance(value, Mapping):
        return "mapping"
    if isinstance(value, (list, tuple)):
        return "list"
    return type(value).__name__


def _deep_merge(base: Any, overlay: Any, *, path: str) -> Any:
    """Overlay wins: mappings merge key by key and lists are replaced whole.

    A null overlay value keeps the key and sets it to null.
    """

    if overlay is None or base is None:
        return overlay

    base_shape, overlay_shape = _shape(base), _shape(overlay)
    scalar = base_shape not in ("mapping", "list") and overlay_shape not in ("mapping", "list")
    if base_shape != overlay_shape and not scalar:
        raise ValueError(
            f"Invalid request overlay merge at {path or '<root>'}: "
            f"base is {base_shape} but overlay is {overlay_shape}"
        )

    if base_shape == "list":
        return list(overlay)
    if base_shape != "mapping":
        return overlay

    merged: dict[str, Any] = dict(base)
    for key, value in overlay.items():
        key_path = f"{path}.{key}" if path else str(key)
        merged[key] = _deep_merge(base[key], value, path=key_path) if key in base else value
    return merged


def _expand(path: str) -> str:
    return os.path.abspath(os.path.expandvars(os.path.expanduser(path)))


def load_request(
    path: str | os.PathLike[str] | None = None,
    *,
    overlays: Sequence[str | os.PathLike[str]] = (),
    env_var: str = REQUEST_ENV_VAR,
) -> tuple[dict[str, Any], dict[str, Any]]:
    """
    Load a build request from YAML, then deep-merge each overlay file on top.

    When `path` is None the request path is taken from `env_var`.
    Returns (request_mapping, meta) where meta records the files that were read.
    """

    explicit = str(path).strip() if path is not None else ""
    mode = "explicit"
    if not explicit:
        explicit = os.environ.get(env_var, "").strip()
        mode = "env"
    if not explicit:
        raise ValueError(f"No request file given (pass a path or set {env_var})")

    base_path = _expand(explicit)
    if not os.path.exists(base_path):
        raise FileNotFoundError(f"Missing request file: {base_path}")

    request = _read_yaml_mapping(base_path)
    loaded_paths = [base_path]

    for overlay_path in overlays:
        expanded = _expand(str(overlay_path))
        if not os.path.exists(expanded):
            raise FileNotFoundError(f"Missing request overlay file: {expanded}")
        request = _deep_merge(request, _read_yaml_mapping(expanded), path="")
        loaded_paths.append(expanded)

    if overlays:
        mode = f"{mode}+overlay"

    meta = {"mode": mode, "paths": loaded_paths, "env_var": env_var}
    return request, meta
