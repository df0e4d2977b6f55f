"""Machine instructions, toolpath emission and G-code encoding."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

from .coordinates import page_to_machine
from .errors import InvalidMove
from .structures import DeviceGeometry, PlacedCell

LINE_END = "\r\n"


@dataclass(frozen=True)
class SetAbsolutePositioning:
    """Switch the controller to absolute coordinates."""


@dataclass(frozen=True)
class SetSpeed:
    value: float


@dataclass(frozen=True)
class MoveLinear:
    """Linear move; an axis left as ``None`` is not commanded."""

    x: Optional[float] = None
    y: Optional[float] = None
    z: Optional[float] = None
    rapid: bool = False

    def __post_init__(self) -> None:
        if self.x is None and self.y is None and self.z is None:
            raise InvalidMove("Null position when moving.")


Instruction = Union[SetAbsolutePositioning, SetSpeed, MoveLinear]


def emit_toolpath(cells: Iterable[PlacedCell], geometry: DeviceGeometry) -> List[Instruction]:
    """Turn placed cells into the ordered instruction stream.

    Every cell starts with a travel move to its anchor, even when the top
    left dot is not raised. Each dot is then embossed by lowering and
    raising the head; dots away from the anchor get their own travel move
    first.
    """

    head_up = geometry.head_up_position
    head_down = geometry.head_down_position
    rapid = geometry.rapid_travel

    instructions: List[Instruction] = [
        SetAbsolutePositioning(),
        SetSpeed(geometry.speed),
        MoveLinear(z=head_up),
    ]

    for placed in cells:
        mx, my = page_to_machine(placed.x, placed.y, geometry)
        instructions.append(MoveLinear(x=mx, y=my, rapid=rapid))
        for dot in placed.dots:
            if not dot.is_cell_origin:
                mx, my = page_to_machine(dot.x, dot.y, geometry)
                instructions.append(MoveLinear(x=mx, y=my, rapid=rapid))
            instructions.append(MoveLinear(z=head_down))
            instructions.append(MoveLinear(z=head_up))

    return instructions


def format_number(value: float) -> str:
    """Format a coordinate without trailing zeros, rounded to 4 decimals."""

    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def format_instruction(instruction: Instruction) -> str:
    if isinstance(instruction, SetAbsolutePositioning):
        return "G90;"
    if isinstance(instruction, SetSpeed):
        return f"G1 F{format_number(instruction.value)};"

    code = "G0" if instruction.rapid else "G1"
    for axis, value in (("X", instruction.x), ("Y", instruction.y), ("Z", instruction.z)):
        if value is not None:
            code += f" {axis}{format_number(value)}"
    return code + ";"


def to_gcode(instructions: Iterable[Instruction]) -> str:
    """Serialise instructions to G-code text with CRLF line endings.

    Numbers go through format_number, so every coordinate is rounded to
    4 decimals and a value smaller than 0.00005 in magnitude prints as 0.
    """

    return "".join(format_instruction(item) + LINE_END for item in instructions)
