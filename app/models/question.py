"""Puzzle question model."""

from typing import List, Optional

from pydantic import BaseModel, Field


class Question(BaseModel):
    """
    A riddle in the solve sequence.

    Questions are presented strictly in ascending ``order``. Hints are always
    revealed together. ``hint_password`` is stored in plaintext and is visible
    to admins.
    """

    id: str
    text: str
    answer: str
    hints: List[str] = Field(default_factory=list)
    hint_password: Optional[str] = None
    order: int = Field(ge=1)

    @property
    def requires_password(self) -> bool:
        return bool(self.hint_password and self.hint_password.strip())
