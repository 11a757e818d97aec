"""Image transformation schemas shared by the asset storage backends."""

from typing import Literal, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

type EffectName = Literal["crop", "brightness", "contrast", "saturation"]

SCALAR_EFFECTS: tuple[str, ...] = ("brightness", "contrast", "saturation")


class CropBox(BaseModel):
    """Rectangle to keep, in source-image pixels."""

    model_config = ConfigDict(frozen=True)

    x: int = Field(default=0, ge=0)
    y: int = Field(default=0, ge=0)
    width: int = Field(gt=0)
    height: int = Field(gt=0)


class Transformation(BaseModel):
    """
    One named image effect.

    ``crop`` carries a ``box``; the scalar effects carry a signed
    ``amount`` in the range -100..100 where 0 leaves the image unchanged.
    """

    model_config = ConfigDict(frozen=True)

    effect: EffectName
    amount: int | None = Field(default=None, ge=-100, le=100)
    box: CropBox | None = None

    @model_validator(mode="after")
    def check_arguments(self) -> Self:
        if self.effect == "crop" and self.box is None:
            mssg = "crop requires a box"
            raise ValueError(mssg)
        if self.effect in SCALAR_EFFECTS and self.amount is None:
            mssg = f"{self.effect} requires an amount"
            raise ValueError(mssg)
        return self
