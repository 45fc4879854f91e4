"""The closed set of part variants and their uniform capability surface."""

from enum import StrEnum, auto
from typing import Annotated, Any, ClassVar, assert_never

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from chanflow._typeexpr import parse_type

from ._pin import PinDefinition, PinDirection


class PartType(StrEnum):
    """Tag identifying a part variant in graph documents."""

    CODE = auto()  # Literal code block with explicitly typed pins
    TRANSFORM = auto()  # One generic input to one generic output
    BROADCAST = auto()  # One input copied to every output
    GATHER = auto()  # Every input merged into one output
    UNSLICER = auto()  # Slice input emitted element by element


def _check_type_text(text: str) -> str:
    parse_type(text)
    return text


class CodePin(BaseModel):
    """Pin declaration inside a code part."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Annotated[str, AfterValidator(_check_type_text)]
    dir: PinDirection


class Code(BaseModel):
    """A literal code block with explicitly declared pins.

    Pins may still use type parameters (``$T``), which are then inferred
    from whatever the pins are wired to.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")
    part_type: ClassVar[PartType] = PartType.CODE

    imports: tuple[str, ...] = ()
    head: str = ""
    body: str = ""
    tail: str = ""
    pins: dict[str, CodePin] = Field(default_factory=dict)


class Transform(BaseModel):
    """Applies ``body`` to every value read from ``input``, writing to ``output``."""

    model_config = ConfigDict(frozen=True, extra="forbid")
    part_type: ClassVar[PartType] = PartType.TRANSFORM

    imports: tuple[str, ...] = ()
    body: str = ""


class Broadcast(BaseModel):
    """Copies every value from ``input`` to each of ``output_num`` outputs."""

    model_config = ConfigDict(frozen=True, extra="forbid")
    part_type: ClassVar[PartType] = PartType.BROADCAST

    output_num: Annotated[int, Field(ge=1)] = 2


class Gather(BaseModel):
    """Forwards values from each of ``input_num`` inputs to ``output``."""

    model_config = ConfigDict(frozen=True, extra="forbid")
    part_type: ClassVar[PartType] = PartType.GATHER

    input_num: Annotated[int, Field(ge=1)] = 2


class Unslicer(BaseModel):
    """Reads slices from ``input`` and sends their elements on ``output``."""

    model_config = ConfigDict(frozen=True, extra="forbid")
    part_type: ClassVar[PartType] = PartType.UNSLICER


Part = Code | Transform | Broadcast | Gather | Unslicer

PART_MODELS: dict[PartType, type[Part]] = {
    PartType.CODE: Code,
    PartType.TRANSFORM: Transform,
    PartType.BROADCAST: Broadcast,
    PartType.GATHER: Gather,
    PartType.UNSLICER: Unslicer,
}


def parse_part(part_type: PartType | str, config: dict[str, Any] | None = None) -> Part:
    """Build a part from its tag and document configuration.

    Raises:
        ValueError: If ``part_type`` is not a known variant.
        pydantic.ValidationError: If ``config`` does not fit the variant.

    """
    model = PART_MODELS[PartType(part_type)]
    return model.model_validate(config or {})


def _pin(name: str, direction: PinDirection, type_: str) -> tuple[str, PinDefinition]:
    return name, PinDefinition(name=name, direction=direction, type=type_)


def pins_of(part: Part) -> dict[str, PinDefinition]:
    """Return the pins a part exposes, keyed by pin name."""
    match part:
        case Code(pins=pins):
            return dict(_pin(name, p.dir, p.type) for name, p in pins.items())
        case Transform():
            return dict([_pin("input", PinDirection.IN, "$In"), _pin("output", PinDirection.OUT, "$Out")])
        case Broadcast(output_num=n):
            outputs = [_pin(f"output{i}", PinDirection.OUT, "$T") for i in range(n)]
            return dict([_pin("input", PinDirection.IN, "$T"), *outputs])
        case Gather(input_num=n):
            inputs = [_pin(f"input{i}", PinDirection.IN, "$T") for i in range(n)]
            return dict([*inputs, _pin("output", PinDirection.OUT, "$T")])
        case Unslicer():
            return dict([_pin("input", PinDirection.IN, "[]$T"), _pin("output", PinDirection.OUT, "$T")])
        case _:
            assert_never(part)


def imports_of(part: Part) -> tuple[str, ...]:
    """Return the import lines a part needs in the generated program."""
    match part:
        case Code(imports=imports) | Transform(imports=imports):
            return imports
        case Broadcast() | Gather() | Unslicer():
            return ()
        case _:
            assert_never(part)
