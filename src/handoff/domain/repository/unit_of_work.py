"""Abstract unit of work spanning the repositories."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ContextManager


class UnitOfWork(ABC):

    @abstractmethod
    def transaction(self) -> ContextManager[None]:
        """Group the repository writes made inside the block into one step.

        Either every write made in the block is stored or, if the block
        raises, none of them is.  Blocks may nest; a nested block joins
        the enclosing one.
        """
