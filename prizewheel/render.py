# prizewheel/render.py
from __future__ import annotations

import asyncio
import io
import math
from functools import lru_cache
from typing import List, Sequence, Tuple

from PIL import Image, ImageDraw

from .angles import normalize_angle
from .constants import WHEEL_FPS, WHEEL_SIZE
from .segments import Segment, sector_bounds

# ---------------- Tunables ----------------
SPIN_SECONDS = 5.0
PAD_SECONDS = 0.8                   # static lead-in (covers client start-up)
TAIL_SECONDS = 0.8                  # static hold at end (prevents frame-1 flash)
GIF_COLORS = 64
MAX_UPLOAD_BYTES = 8 * 1024 * 1024
RIM_MARGIN = 24                     # room for the pointer outside the rim

PALETTE = [
    ((30, 58, 138), (255, 255, 255)),     # navy slice, white text
    ((248, 250, 255), (30, 58, 138)),     # white slice, navy text
]
ODD_COUNT_EXTRA = ((59, 130, 246), (255, 255, 255))
BACKGROUND = (255, 255, 255, 255)

LayoutKey = Tuple[str, ...]


def layout_key(segments: Sequence[Segment]) -> LayoutKey:
    return tuple(s.prize_label for s in segments)


def _slice_colors(i: int, count: int):
    # keep the first and last slice from sharing a color on odd wheels
    if count % 2 == 1 and count > 1 and i == count - 1:
        return ODD_COUNT_EXTRA
    return PALETTE[i % len(PALETTE)]


def _radius(size: int) -> int:
    # tiny canvases still get a visible wheel
    return max(8, size // 2 - RIM_MARGIN)


def _draw_wheel_base(labels: LayoutKey, size: int) -> Image.Image:
    """Wheel at rotation 0, sector i drawn clockwise from 3 o'clock, no pointer."""
    cx = cy = size // 2
    radius = _radius(size)
    img = Image.new("RGBA", (size, size), BACKGROUND)
    draw = ImageDraw.Draw(img)
    count = len(labels)

    for i, label in enumerate(labels):
        fill, text_color = _slice_colors(i, count)
        a0, a1 = sector_bounds(i, count)
        draw.pieslice([cx - radius, cy - radius, cx + radius, cy + radius],
                      a0, a1, fill=fill, outline=(148, 163, 184), width=2)

        mid = math.radians((a0 + a1) / 2)
        tx = cx + int(math.cos(mid) * (radius * 0.62))
        ty = cy + int(math.sin(mid) * (radius * 0.62))
        text = str(label or "")
        if not text:
            continue
        bbox = draw.textbbox((0, 0), text)
        tw, th = bbox[2] - bbox[0], bbox[3] - bbox[1]
        draw.text((tx - tw // 2, ty - th // 2), text, fill=text_color)

    # center hub
    draw.ellipse([cx - 14, cy - 14, cx + 14, cy + 14], fill=(250, 250, 250), outline=(0, 0, 0))
    return img


@lru_cache(maxsize=16)
def _wheel_base_cached(labels: LayoutKey, size: int) -> Image.Image:
    """Cache the labelled wheel; copy() before modifying."""
    return _draw_wheel_base(labels, size)


def pointer_polygon(size: int, pointer_angle: float) -> List[Tuple[float, float]]:
    """Triangle sitting on the rim at `pointer_angle`, apex pointing at the hub."""
    cx = cy = size / 2
    radius = _radius(size)
    theta = math.radians(normalize_angle(pointer_angle))
    ux, uy = math.cos(theta), math.sin(theta)
    px, py = -uy, ux
    base_r, apex_r, half = radius + 20, radius - 6, 12
    return [
        (cx + ux * base_r + px * half, cy + uy * base_r + py * half),
        (cx + ux * base_r - px * half, cy + uy * base_r - py * half),
        (cx + ux * apex_r, cy + uy * apex_r),
    ]


def _draw_pointer(img: Image.Image, pointer_angle: float) -> None:
    ImageDraw.Draw(img).polygon(pointer_polygon(img.size[0], pointer_angle), fill=(0, 0, 0))


def render_frame(labels: LayoutKey, rotation: float, pointer_angle: float, size: int = WHEEL_SIZE) -> Image.Image:
    """Wheel turned forward (clockwise on screen) by `rotation` degrees."""
    base = _wheel_base_cached(labels, size)
    # Image.rotate turns counter-clockwise
    frame = base.rotate(-normalize_angle(rotation), resample=Image.Resampling.BICUBIC, expand=False,
                        center=(size // 2, size // 2), fillcolor=BACKGROUND)
    _draw_pointer(frame, pointer_angle)
    return frame


def render_static_wheel(labels: LayoutKey, rotation: float, pointer_angle: float, size: int = WHEEL_SIZE) -> io.BytesIO:
    buf = io.BytesIO()
    render_frame(labels, rotation, pointer_angle, size).save(buf, format="PNG")
    buf.seek(0)
    return buf


def ease_out_cubic(progress: float) -> float:
    progress = min(1.0, max(0.0, progress))
    return 1 - (1 - progress) ** 3


def spin_angles(
    start_rotation: float,
    target_rotation: float,
    *,
    duration_sec: float = SPIN_SECONDS,
    pad_sec: float = PAD_SECONDS,
    tail_sec: float = TAIL_SECONDS,
    fps: int = WHEEL_FPS,
) -> List[float]:
    """Rotation for every frame; the last frame is exactly `target_rotation`."""
    total_time = pad_sec + duration_sec + tail_sec
    total_frames = max(8, int(fps * total_time))
    travel = target_rotation - start_rotation
    angles: List[float] = []
    for i in range(total_frames):
        t = i / (total_frames - 1) * total_time
        if t <= pad_sec:
            angle = start_rotation
        elif t >= pad_sec + duration_sec:
            angle = target_rotation
        else:
            angle = start_rotation + travel * ease_out_cubic((t - pad_sec) / duration_sec)
        angles.append(angle)
    return angles


def render_spin_gif(
    labels: LayoutKey,
    start_rotation: float,
    target_rotation: float,
    pointer_angle: float,
    *,
    size: int = WHEEL_SIZE,
    duration_sec: float = SPIN_SECONDS,
    pad_sec: float = PAD_SECONDS,
    tail_sec: float = TAIL_SECONDS,
    fps: int = WHEEL_FPS,
) -> io.BytesIO:
    frames: List[Image.Image] = []
    for angle in spin_angles(start_rotation, target_rotation, duration_sec=duration_sec,
                             pad_sec=pad_sec, tail_sec=tail_sec, fps=fps):
        frame = render_frame(labels, angle, pointer_angle, size)
        frames.append(frame.convert("P", palette=Image.Palette.ADAPTIVE, colors=GIF_COLORS))

    buf = io.BytesIO()
    frames[0].save(
        buf, format="GIF", save_all=True, append_images=frames[1:],
        duration=int(1000 / fps), loop=0, disposal=2, optimize=True
    )
    buf.seek(0)
    return buf


async def render_spin_gif_async(
    labels: LayoutKey,
    start_rotation: float,
    target_rotation: float,
    pointer_angle: float,
    *,
    size: int = WHEEL_SIZE,
    duration_sec: float = SPIN_SECONDS,
) -> io.BytesIO:
    return await asyncio.to_thread(
        render_spin_gif,
        labels,
        start_rotation,
        target_rotation,
        pointer_angle,
        size=size,
        duration_sec=duration_sec,
    )
