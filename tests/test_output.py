"""PNG output of finished raster buffers."""

from __future__ import annotations

import os

import pygame
import pytest

from configuration import RasterConfig
from particle import Sample
from utils import load_config, setup_logging
from visualization import Rasterizer, save_raster_images


def test_buffers_are_written_as_png(tmp_path):
    rasterizer = Rasterizer(RasterConfig(), [0, 1])
    rasterizer.consume([Sample(0, -500.0, 10.0), Sample(1, 500.0, 300.0)])
    output_dir = tmp_path / "images"

    paths = save_raster_images(rasterizer.buffers, {0: "y10", 1: "y15"}, str(output_dir))

    assert [os.path.basename(p) for p in paths] == ["y10.png", "y15.png"]
    first = pygame.image.load(paths[0])
    assert first.get_size() == (1001, 301)
    assert tuple(first.get_at((0, 10)))[:3] == (255, 0, 0)
    assert tuple(first.get_at((1000, 300)))[:3] == (0, 0, 0)
    second = pygame.image.load(paths[1])
    assert tuple(second.get_at((1000, 300)))[:3] == (255, 0, 0)


def test_load_config_reads_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text('{"run_control": {"performance": 3}}')
    assert load_config(str(path)) == {"run_control": {"performance": 3}}


def test_load_config_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.json"))


def test_setup_logging_creates_log_file(tmp_path):
    import logging
    import logging.handlers

    log_file = tmp_path / "logs" / "run.log"
    setup_logging(
        {"logging": {"level": "debug", "log_file": str(log_file), "max_bytes": 2048, "backup_count": 2}}
    )
    try:
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert logging.getLogger("numba").level == logging.WARNING
        assert log_file.exists()
        rotating = [h for h in root.handlers if isinstance(h, logging.handlers.RotatingFileHandler)]
        assert len(rotating) == 1
        assert rotating[0].maxBytes == 2048
        assert rotating[0].backupCount == 2
    finally:
        for handler in logging.getLogger().handlers:
            handler.close()
        logging.getLogger().handlers.clear()
        logging.getLogger().setLevel(logging.WARNING)
