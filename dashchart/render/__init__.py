from .raster import export_png, parse_path, scene_to_image
from .svg import scene_to_element, scene_to_svg, write_svg

__all__ = [
    "export_png",
    "parse_path",
    "scene_to_element",
    "scene_to_image",
    "scene_to_svg",
    "write_svg",
]
