# visualization.py
"""
Rasterizes trajectory samples and writes the finished images with Pygame.
"""
import logging
import math
import os
import pygame
import numpy as np
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from configuration import RasterConfig
from particle import Sample

# --- Data Contracts ---
#
# class RasterBuffer:
#   - pixels: uint8 array of shape (width, height, 3), indexed [x, y].
#     Same layout as pygame.surfarray.
#   - mark(self, px: int, py: int, color) -> None: idempotent pixel write.
#
# class Rasterizer:
#   - __init__(self, raster: RasterConfig, worker_ids: Sequence[int]):
#     - Side Effects: Allocates one RasterBuffer per worker id.
#   - to_pixel(self, x: float, y: float) -> Optional[Tuple[int, int]]:
#     - Outputs: Pixel coordinates rounded to the nearest pixel, or None
#       if they fall outside [0, width) x [0, height).
#   - add_sample(self, sample: Sample) -> bool:
#     - Side Effects: Marks a pixel in buffers[sample.worker_id] only.
#   - consume(self, samples: Iterable[Sample]) -> Dict[int, RasterBuffer]:
#     - Drains the iterable until it is exhausted.
#
# save_raster_images(buffers, names, output_dir) -> List[str]:
#   - Side Effects: Writes one PNG per buffer. Creates output_dir.


class RasterBuffer:
    """
    An RGB pixel grid holding one rendered trajectory.
    """
    def __init__(self, width: int, height: int, background: Tuple[int, int, int] = (0, 0, 0)):
        self.width = width
        self.height = height
        self.pixels = np.empty((width, height, 3), dtype=np.uint8)
        self.pixels[:, :] = background
        self.marked = np.zeros((width, height), dtype=bool)

    def mark(self, px: int, py: int, color: Tuple[int, int, int]) -> None:
        self.pixels[px, py] = color
        self.marked[px, py] = True

    def is_marked(self, px: int, py: int) -> bool:
        return bool(self.marked[px, py])

    @property
    def marked_count(self) -> int:
        return int(np.count_nonzero(self.marked))


class Rasterizer:
    """
    The single consumer of the sample stream.

    Routes each sample to the buffer of its worker and discards samples
    outside the frame. Marking is commutative and idempotent, so the
    interleaving of workers never changes the result.
    """
    def __init__(self, raster: RasterConfig, worker_ids: Sequence[int], log_throttle: int = 100000):
        self.raster = raster
        self.buffers: Dict[int, RasterBuffer] = {
            worker_id: RasterBuffer(raster.width, raster.height, raster.background)
            for worker_id in worker_ids
        }
        self.log_throttle = log_throttle
        self.samples_received = 0
        self.samples_drawn = 0
        self.samples_per_worker: Dict[int, int] = {worker_id: 0 for worker_id in worker_ids}

        logging.info(
            f"Rasterizer initialized with {len(self.buffers)} buffers "
            f"({raster.width}x{raster.height})."
        )

    def to_pixel(self, x: float, y: float) -> Optional[Tuple[int, int]]:
        raster = self.raster
        local_x = x * raster.scale + raster.x_offset
        local_y = y * raster.scale + raster.y_offset
        # A diverged trajectory can produce inf/nan; it is simply off-frame.
        if not (math.isfinite(local_x) and math.isfinite(local_y)):
            return None
        px = int(round(local_x))
        py = int(round(local_y))
        if 0 <= px < raster.width and 0 <= py < raster.height:
            return (px, py)
        return None

    def add_sample(self, sample: Sample) -> bool:
        """Returns True if the sample landed inside the frame."""
        buffer = self.buffers[sample.worker_id]
        self.samples_received += 1
        self.samples_per_worker[sample.worker_id] += 1

        pixel = self.to_pixel(sample.x, sample.y)
        if pixel is None:
            return False
        buffer.mark(pixel[0], pixel[1], self.raster.color)
        self.samples_drawn += 1
        return True

    def consume(self, samples: Iterable[Sample]) -> Dict[int, RasterBuffer]:
        for sample in samples:
            self.add_sample(sample)
            if self.samples_received % self.log_throttle == 0:
                logging.debug(f"Rasterizer received {self.samples_received} samples.")

        for worker_id, buffer in self.buffers.items():
            logging.info(f"Buffer {worker_id}: {buffer.marked_count} pixels marked.")
        return self.buffers


def save_raster_images(buffers: Dict[int, RasterBuffer], names: Dict[int, str], output_dir: str) -> List[str]:
    """
    Encodes every buffer as a PNG named after its initial condition.

    Args:
        buffers (Dict[int, RasterBuffer]): Finished buffers keyed by worker id.
        names (Dict[int, str]): File stem per worker id, e.g. "y10".
        output_dir (str): Directory to write into.

    Returns:
        List[str]: The written file paths.
    """
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    paths = []
    for worker_id, buffer in buffers.items():
        path = os.path.join(output_dir, f"{names[worker_id]}.png")
        surface = pygame.surfarray.make_surface(buffer.pixels)
        pygame.image.save(surface, path)
        logging.info(f"Saved trajectory image {path}.")
        paths.append(path)
    return paths
