from __future__ import annotations

from pathlib import Path
from typing import Optional
import xml.etree.ElementTree as ET

from dashchart.geometry.primitives import fmt_num
from dashchart.scene import (
    CircleShape,
    Drawable,
    LineShape,
    LinearGradient,
    PathShape,
    PolygonShape,
    RectShape,
    Scene,
    TextShape,
)


SVG_NS = "http://www.w3.org/2000/svg"
DEFAULT_FONT_FAMILY = "system-ui, -apple-system, sans-serif"


def scene_to_element(scene: Scene, *, font_family: str = DEFAULT_FONT_FAMILY) -> ET.Element:
    root = ET.Element(
        "svg",
        {
            "xmlns": SVG_NS,
            "width": fmt_num(scene.width),
            "height": fmt_num(scene.height),
            "viewBox": f"0 0 {fmt_num(scene.width)} {fmt_num(scene.height)}",
        },
    )
    if scene.gradients:
        defs = ET.SubElement(root, "defs")
        for gradient in scene.gradients:
            _gradient(defs, gradient)
    for item in scene.items:
        _drawable(root, item, font_family)
    return root


def scene_to_svg(scene: Scene, *, font_family: str = DEFAULT_FONT_FAMILY) -> str:
    """Serialize a scene to standalone SVG markup."""

    return ET.tostring(scene_to_element(scene, font_family=font_family), encoding="unicode")


def write_svg(scene: Scene, out_path: Path, *, font_family: str = DEFAULT_FONT_FAMILY) -> Path:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(scene_to_svg(scene, font_family=font_family), encoding="utf-8")
    return out_path


def _gradient(defs: ET.Element, gradient: LinearGradient) -> None:
    elem = ET.SubElement(
        defs,
        "linearGradient",
        {"id": gradient.gradient_id, "x1": "0", "y1": "0", "x2": "0", "y2": "1"},
    )
    for offset, opacity in (("0%", gradient.top_opacity), ("100%", gradient.bottom_opacity)):
        ET.SubElement(
            elem,
            "stop",
            {"offset": offset, "stop-color": gradient.color, "stop-opacity": fmt_num(opacity)},
        )


def _drawable(parent: ET.Element, item: Drawable, font_family: str) -> None:
    if isinstance(item, LineShape):
        ET.SubElement(
            parent,
            "line",
            {
                "x1": fmt_num(item.x1),
                "y1": fmt_num(item.y1),
                "x2": fmt_num(item.x2),
                "y2": fmt_num(item.y2),
                "stroke": item.stroke,
                "stroke-width": fmt_num(item.stroke_width),
            },
        )
    elif isinstance(item, RectShape):
        attrs = {
            "x": fmt_num(item.x),
            "y": fmt_num(item.y),
            "width": fmt_num(item.width),
            "height": fmt_num(item.height),
            "fill": item.fill,
        }
        if item.corner_radius:
            attrs["rx"] = fmt_num(item.corner_radius)
        if item.opacity != 1.0:
            attrs["opacity"] = fmt_num(item.opacity)
        if item.mark_index is not None:
            attrs["data-index"] = str(item.mark_index)
        ET.SubElement(parent, "rect", attrs)
    elif isinstance(item, PathShape):
        fill = f"url(#{item.gradient_id})" if item.gradient_id else (item.fill or "none")
        attrs = {"d": item.d, "fill": fill}
        if item.fill_opacity != 1.0:
            attrs["fill-opacity"] = fmt_num(item.fill_opacity)
        _stroke_attrs(attrs, item.stroke, item.stroke_width, item.dash_array, item.dash_offset, item.round_caps)
        ET.SubElement(parent, "path", attrs)
    elif isinstance(item, CircleShape):
        attrs = {
            "cx": fmt_num(item.cx),
            "cy": fmt_num(item.cy),
            "r": fmt_num(item.r),
            "fill": item.fill or "none",
        }
        _stroke_attrs(attrs, item.stroke, item.stroke_width, item.dash_array, item.dash_offset, item.round_caps)
        if item.rotate_deg:
            attrs["transform"] = f"rotate({fmt_num(item.rotate_deg)} {fmt_num(item.cx)} {fmt_num(item.cy)})"
        if item.mark_index is not None:
            attrs["data-index"] = str(item.mark_index)
        if item.series_key is not None:
            attrs["data-series"] = item.series_key
        ET.SubElement(parent, "circle", attrs)
    elif isinstance(item, PolygonShape):
        points = " ".join(f"{fmt_num(x)},{fmt_num(y)}" for x, y in item.points)
        ET.SubElement(parent, "polygon", {"points": points, "fill": item.fill})
    elif isinstance(item, TextShape):
        attrs = {
            "x": fmt_num(item.x),
            "y": fmt_num(item.y),
            "fill": item.fill,
            "font-size": fmt_num(item.font_px),
            "font-family": font_family,
            "text-anchor": item.anchor,
        }
        if item.bold:
            attrs["font-weight"] = "bold"
        elem = ET.SubElement(parent, "text", attrs)
        elem.text = item.text
    else:
        raise TypeError(f"unsupported drawable: {type(item)!r}")


def _stroke_attrs(
    attrs: dict[str, str],
    stroke: Optional[str],
    stroke_width: float,
    dash_array: Optional[str],
    dash_offset: Optional[str],
    round_caps: bool,
) -> None:
    if not stroke or stroke_width <= 0:
        return
    attrs["stroke"] = stroke
    attrs["stroke-width"] = fmt_num(stroke_width)
    if dash_array is not None:
        attrs["stroke-dasharray"] = dash_array
    if dash_offset is not None:
        attrs["stroke-dashoffset"] = dash_offset
    if round_caps:
        attrs["stroke-linecap"] = "round"
        attrs["stroke-linejoin"] = "round"
