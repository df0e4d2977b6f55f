"""Conversion between page space and machine space."""

from __future__ import annotations

from typing import Tuple

from .structures import DeviceGeometry


def page_to_machine(x: float, y: float, geometry: DeviceGeometry) -> Tuple[float, float]:
    """Map page coordinates (top-left origin, Y down) to machine coordinates.

    Edge-referenced machines put the origin in a sheet corner with Y up;
    center-referenced (delta) machines put it in the middle of the sheet.
    The X axis is mirrored in both cases since the sheet is embossed from
    the back.
    """

    mx = geometry.paper_width - x
    if geometry.center_origin:
        return mx - geometry.paper_width / 2, geometry.paper_height / 2 - y
    return mx, geometry.paper_height - y


def machine_to_page(mx: float, my: float, geometry: DeviceGeometry) -> Tuple[float, float]:
    """Inverse of :func:`page_to_machine`."""

    if geometry.center_origin:
        return geometry.paper_width / 2 - mx, geometry.paper_height / 2 - my
    return geometry.paper_width - mx, geometry.paper_height - my
