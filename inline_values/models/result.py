"""Result models for a wrap attempt."""

from typing import Union

from pydantic import BaseModel, Field


class Rewritten(BaseModel):
    """Successfully rewritten source."""

    text: str
    wrap_count: int = Field(0, description="Number of wrapped expressions")


class ParseFailure(BaseModel):
    """Structured description of why the source could not be parsed."""

    message: str
    line: int = Field(..., description="Line number (1-indexed)")
    column: int = Field(..., description="Column (0-indexed)")
    snippet: str = Field("", description="Source text at the failure")

    def __str__(self) -> str:
        return f"{self.message} at line {self.line}, column {self.column}"


WrapOutcome = Union[Rewritten, ParseFailure]
