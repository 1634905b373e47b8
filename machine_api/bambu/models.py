"""Bambu Lab printer models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .const import UNKNOWN_MODEL_CODE


@dataclass(frozen=True)
class UnknownModel:
    """A model code that is not in the model table."""

    code: str

    def __str__(self) -> str:
        """Return the vendor code verbatim."""
        return self.code


class BambuModel(Enum):
    """
    Represents a known Bambu Lab printer model.

    The value of each member is the model code the printer announces.
    """

    A1_MINI = "N1"
    A1 = "N2S"
    P1P = "C11"
    P1S = "C12"
    X1_CARBON = "BL-P001"

    @property
    def display_name(self) -> str:
        """Return the marketing name of the model."""
        return _DISPLAY_NAMES[self]

    def __str__(self) -> str:
        """Return the marketing name of the model."""
        return self.display_name

    @classmethod
    def from_code(cls, code: str | None) -> BambuModel | UnknownModel:
        """
        Return the model for a vendor model code.

        Arguments:
            code: The model code from the printer's announcement.

        Returns:
            The matching model, or an UnknownModel carrying the code. A
            missing code resolves to ``UnknownModel("Unknown")``.

        """
        if code is None:
            return UnknownModel(UNKNOWN_MODEL_CODE)
        try:
            return cls(code)
        except ValueError:
            return UnknownModel(code)


_DISPLAY_NAMES = {
    BambuModel.A1_MINI: "Bambu Lab A1 mini",
    BambuModel.A1: "Bambu Lab A1",
    BambuModel.P1P: "Bambu Lab P1P",
    BambuModel.P1S: "Bambu Lab P1S",
    BambuModel.X1_CARBON: "Bambu Lab X1 Carbon",
}
