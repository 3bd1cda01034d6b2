"""End-to-end frame generation: resize, palette, render, assemble.

Frames only read the base image and the shared palette, never each other,
so they can be rendered in any order. With ``workers > 1`` they are
rendered in a process pool and put back in index order; the result is
identical to sequential rendering.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass

import numpy as np
from tqdm import tqdm

from .animation import Animation, Frame, assemble, frame_delay
from .compositor import render_frame
from .config import AnimationRequest
from .effects import Effect
from .errors import ShapeError, log_info_with_context
from .palette import Palette, build_palette
from .sampling import resize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameTask:
    """Everything a worker needs to render one frame."""

    base: np.ndarray
    effects: tuple[Effect, ...]
    frame_index: int
    frame_count: int
    palette: Palette
    delay_cs: int
    direction: int


def _render_task(task: FrameTask) -> tuple[int, Frame]:
    frame = render_frame(
        task.base,
        task.effects,
        task.frame_index,
        task.frame_count,
        task.palette,
        task.delay_cs,
        task.direction,
    )
    return task.frame_index, frame


def prepare_base_image(image: np.ndarray, request: AnimationRequest) -> np.ndarray:
    """Apply the optional resize and check shape requirements of the chain.

    Raises:
        ShapeError: If rotate is requested for a non-square image
    """
    base = resize(image, request.resize_width) if request.resize_width > 0 else image

    height, width = base.shape[:2]
    if Effect.ROTATE in request.effects and width != height:
        raise ShapeError(
            f"image must be square (got {width}x{height})",
            context={"effect": Effect.ROTATE.value, "width": width, "height": height},
        )
    return base


def render_frames(
    base: np.ndarray,
    request: AnimationRequest,
    palette: Palette,
    progress: bool = False,
) -> list[Frame]:
    """Render all frames of ``request`` in generation order."""
    delay_cs = frame_delay(request.rate)
    tasks = [
        FrameTask(
            base=base,
            effects=tuple(request.effects),
            frame_index=i,
            frame_count=request.frame_count,
            palette=palette,
            delay_cs=delay_cs,
            direction=request.rotation_direction,
        )
        for i in range(request.frame_count)
    ]

    frames: dict[int, Frame] = {}
    with tqdm(
        total=len(tasks), desc="Rendering frames", unit="frame", disable=not progress
    ) as bar:
        if request.workers == 1:
            for task in tasks:
                index, frame = _render_task(task)
                frames[index] = frame
                bar.update(1)
        else:
            with ProcessPoolExecutor(max_workers=request.workers) as executor:
                futures = [executor.submit(_render_task, task) for task in tasks]
                try:
                    for future in as_completed(futures):
                        index, frame = future.result()
                        frames[index] = frame
                        bar.update(1)
                except Exception:
                    for pending in futures:
                        pending.cancel()
                    raise

    return [frames[i] for i in range(request.frame_count)]


def generate_animation(
    image: np.ndarray, request: AnimationRequest, progress: bool = False
) -> Animation:
    """Turn a decoded RGBA image into an animation.

    Args:
        image: ``(h, w, 4)`` uint8 source image
        request: Validated run parameters
        progress: Show a progress bar on stderr

    Returns:
        Animation with ``request.frame_count`` frames
    """
    start_time = time.time()
    base = prepare_base_image(image, request)
    palette = build_palette(base)

    log_info_with_context(
        "Generating animation",
        context={
            "effects": ",".join(e.value for e in request.effects) or "none",
            "frames": request.frame_count,
            "size": f"{base.shape[1]}x{base.shape[0]}",
            "palette_colors": len(palette),
            "workers": request.workers,
        },
        logger=logger,
    )

    frames = render_frames(base, request, palette, progress=progress)
    animation = assemble(frames, palette, reverse=request.reverse)

    elapsed = time.time() - start_time
    logger.info(f"Generated {len(animation)} frames in {elapsed:.2f}s")
    return animation
