"""Concrete pipelines. Each one implements `manifestkit.pipeline.ManifestPipeline`."""

from __future__ import annotations

from image_composer.pipelines.anaconda_tree import AnacondaTreePipeline
from image_composer.pipelines.build import BuildPipeline
from image_composer.pipelines.commit_server_tree import CommitServerTreePipeline
from image_composer.pipelines.live_img import LiveImgPipeline
from image_composer.pipelines.os_tree import OSPipeline
from image_composer.pipelines.ostree_commit import OSTreeCommitPipeline
from image_composer.pipelines.qcow2 import QCOW2Pipeline

__all__ = [
    "AnacondaTreePipeline",
    "BuildPipeline",
    "CommitServerTreePipeline",
    "LiveImgPipeline",
    "OSPipeline",
    "OSTreeCommitPipeline",
    "QCOW2Pipeline",
]
