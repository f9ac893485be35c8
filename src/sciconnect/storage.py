"""Local folder layout."""

from __future__ import annotations

import os


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def ensure_structure(base_dir: str, log_dir: str | None = None) -> dict:
    root = base_dir or os.getcwd()
    paths = {
        "root": root,
        "logs": log_dir or os.path.join(root, "Logs"),
        "config": os.path.join(root, "sciconnect_config.yml"),
    }
    ensure_dir(paths["root"])
    ensure_dir(paths["logs"])
    return paths
