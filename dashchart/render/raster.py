from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from PIL import Image, ImageColor, ImageDraw, ImageFont

from dashchart.scene import (
    ArcStroke,
    CircleShape,
    LineShape,
    LinearGradient,
    PathShape,
    PolygonShape,
    RectShape,
    Scene,
    TextShape,
)


LOGGER = logging.getLogger(__name__)

_TEXT_ANCHORS = {"start": "ls", "middle": "ms", "end": "rs"}


def parse_path(d: str) -> tuple[list[tuple[float, float]], bool]:
    """Points and closed flag of a path made of M/L/Z commands only."""

    tokens = d.replace(",", " ").split()
    points: list[tuple[float, float]] = []
    closed = False
    i = 0
    while i < len(tokens):
        cmd = tokens[i]
        if cmd in ("M", "L"):
            if i + 2 >= len(tokens):
                raise ValueError(f"path command `{cmd}` is missing coordinates: {d!r}")
            points.append((float(tokens[i + 1]), float(tokens[i + 2])))
            i += 3
        elif cmd == "Z":
            closed = True
            i += 1
        else:
            raise ValueError(f"unsupported path command `{cmd}` for raster output")
    return points, closed


def scene_to_image(scene: Scene, *, scale: int = 2, background: str = "#FFFFFF") -> Image.Image:
    """Rasterize a scene at `scale` pixels per scene unit."""

    if scale <= 0:
        raise ValueError("scale must be > 0")
    size = (max(1, int(round(scene.width * scale))), max(1, int(round(scene.height * scale))))
    image = Image.new("RGBA", size, color=_rgba(background))
    draw = ImageDraw.Draw(image, "RGBA")
    gradients = {g.gradient_id: g for g in scene.gradients}

    for item in scene.items:
        if isinstance(item, LineShape):
            draw.line(
                [(item.x1 * scale, item.y1 * scale), (item.x2 * scale, item.y2 * scale)],
                fill=_rgba(item.stroke),
                width=_px(item.stroke_width, scale),
            )
        elif isinstance(item, RectShape):
            box = (item.x * scale, item.y * scale, (item.x + item.width) * scale, (item.y + item.height) * scale)
            draw.rounded_rectangle(box, radius=item.corner_radius * scale, fill=_rgba(item.fill, item.opacity))
        elif isinstance(item, PathShape):
            _draw_path(image, draw, item, gradients, scale)
        elif isinstance(item, CircleShape):
            _draw_circle(draw, item, scale)
        elif isinstance(item, PolygonShape):
            draw.polygon([(x * scale, y * scale) for x, y in item.points], fill=_rgba(item.fill))
        elif isinstance(item, TextShape):
            font = ImageFont.load_default(size=item.font_px * scale)
            draw.text(
                (item.x * scale, item.y * scale),
                item.text,
                fill=_rgba(item.fill),
                font=font,
                anchor=_TEXT_ANCHORS[item.anchor],
                stroke_width=1 if item.bold else 0,
                stroke_fill=_rgba(item.fill),
            )
        else:
            raise TypeError(f"unsupported drawable: {type(item)!r}")
    return image


def export_png(scene: Scene, out_path: Path, *, scale: int = 2, background: str = "#FFFFFF") -> Path:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    scene_to_image(scene, scale=scale, background=background).save(out_path, format="PNG")
    LOGGER.info("wrote chart png: %s", out_path)
    return out_path


def _draw_path(
    image: Image.Image,
    draw: ImageDraw.ImageDraw,
    item: PathShape,
    gradients: dict[str, LinearGradient],
    scale: int,
) -> None:
    if item.arc is not None:
        if item.stroke:
            _draw_arc(draw, item.arc, item.stroke, item.stroke_width, scale)
        return
    points, closed = parse_path(item.d)
    pts = [(x * scale, y * scale) for x, y in points]
    if closed and len(pts) >= 3:
        gradient = gradients.get(item.gradient_id) if item.gradient_id else None
        if gradient is not None:
            _fill_gradient(image, pts, gradient)
        elif item.fill:
            draw.polygon(pts, fill=_rgba(item.fill, item.fill_opacity))
    if item.stroke and item.stroke_width > 0 and len(pts) >= 2:
        draw.line(pts, fill=_rgba(item.stroke), width=_px(item.stroke_width, scale), joint="curve" if item.round_caps else None)


def _draw_circle(draw: ImageDraw.ImageDraw, item: CircleShape, scale: int) -> None:
    if item.arc is not None:
        if item.stroke:
            _draw_arc(draw, item.arc, item.stroke, item.stroke_width, scale)
        return
    if item.fill:
        r = item.r * scale
        draw.ellipse((item.cx * scale - r, item.cy * scale - r, item.cx * scale + r, item.cy * scale + r), fill=_rgba(item.fill))
    if item.stroke and item.stroke_width > 0:
        outer = (item.r + item.stroke_width / 2.0) * scale
        draw.ellipse(
            (item.cx * scale - outer, item.cy * scale - outer, item.cx * scale + outer, item.cy * scale + outer),
            outline=_rgba(item.stroke),
            width=_px(item.stroke_width, scale),
        )


def _draw_arc(draw: ImageDraw.ImageDraw, arc: ArcStroke, color: str, stroke_width: float, scale: int) -> None:
    # PIL strokes inward from the bounding box, so the box sits on the outer edge of the band.
    outer = (arc.r + stroke_width / 2.0) * scale
    cx, cy = arc.cx * scale, arc.cy * scale
    draw.arc(
        (cx - outer, cy - outer, cx + outer, cy + outer),
        start=arc.start_deg,
        end=arc.end_deg,
        fill=_rgba(color),
        width=_px(stroke_width, scale),
    )


def _fill_gradient(image: Image.Image, pts: list[tuple[float, float]], gradient: LinearGradient) -> None:
    mask = Image.new("L", image.size, 0)
    ImageDraw.Draw(mask).polygon(pts, fill=255)
    ys = [y for _, y in pts]
    top, bottom = min(ys), max(ys)
    rows = np.arange(image.size[1], dtype=np.float64)
    t = np.clip((rows - top) / max(bottom - top, 1e-9), 0.0, 1.0)
    opacity = gradient.top_opacity + (gradient.bottom_opacity - gradient.top_opacity) * t
    alpha = np.asarray(mask, dtype=np.float64) * opacity[:, None]
    r, g, b, _ = _rgba(gradient.color)
    overlay = Image.new("RGBA", image.size, (r, g, b, 0))
    overlay.putalpha(Image.fromarray(np.clip(alpha, 0, 255).astype(np.uint8)))
    image.alpha_composite(overlay)


def _rgba(color: str, opacity: float = 1.0) -> tuple[int, int, int, int]:
    rgb = ImageColor.getrgb(color)
    alpha = rgb[3] if len(rgb) == 4 else 255
    return (rgb[0], rgb[1], rgb[2], int(round(alpha * opacity)))


def _px(width: float, scale: int) -> int:
    return max(1, int(round(width * scale)))
