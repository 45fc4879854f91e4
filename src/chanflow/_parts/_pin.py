"""Pin definitions exposed by parts."""

from dataclasses import dataclass
from enum import StrEnum, auto


class PinDirection(StrEnum):
    """Direction of data through a pin."""

    IN = auto()  # Receives from its channel
    OUT = auto()  # Sends on its channel


@dataclass(frozen=True, slots=True)
class PinDefinition:
    """Declared shape of a pin.

    Attributes:
        name: Pin name, unique within its part.
        direction: Whether the pin receives or sends.
        type: Type text, possibly containing parameters such as ``$T``.
            Parameters are scoped per node when the type is instantiated.

    """

    name: str
    direction: PinDirection
    type: str

    @property
    def is_input(self) -> bool:
        return self.direction == PinDirection.IN
