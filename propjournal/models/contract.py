"""ContractSpec data model."""

from pydantic import BaseModel, Field


class ContractSpec(BaseModel):
    """Tick specification for a futures product."""

    symbol: str = Field(..., min_length=1, description="Product code")
    tick_size: float = Field(..., gt=0, description="Minimum price increment")
    tick_value: float = Field(..., gt=0, description="Currency value of one tick")

    model_config = {"frozen": True}

    @property
    def ticks_per_point(self) -> float:
        return 1 / self.tick_size

    @property
    def point_value(self) -> float:
        """Currency value of a one-point price move."""
        return round(self.tick_value * self.ticks_per_point, 6)
