"""Service alert domain model."""

from pydantic import BaseModel, ConfigDict


class ServiceAlert(BaseModel):
    """A free-text service alert published by an operator."""

    model_config = ConfigDict(frozen=True)

    header: str
    description: str = ""

    @property
    def text(self) -> str:
        """Header and description joined for keyword scanning."""
        if not self.description:
            return self.header
        return f"{self.header}\n{self.description}"
