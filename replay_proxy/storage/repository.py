"""Storage abstraction for recorded interactions"""

from abc import ABC, abstractmethod
from typing import List

from ..models.interaction import Interaction


class InteractionRepository(ABC):
    """
    Persistence contract for recorded interactions.

    Interactions are keyed by their request fingerprint. Storing an
    interaction whose fingerprint already exists replaces the previous one.
    """

    @abstractmethod
    def store(self, interaction: Interaction) -> None:
        """
        Persist an interaction, replacing any with the same fingerprint.

        Raises:
            StorageError: If the interaction cannot be written
        """

    @abstractmethod
    def find(self, key: str) -> Interaction:
        """
        Look up an interaction by request fingerprint or by interaction id.

        Raises:
            InteractionNotFoundError: If nothing matches
            StorageError: If the matching interaction cannot be read
        """

    @abstractmethod
    def find_all(self) -> List[Interaction]:
        """Return every stored interaction"""

    @abstractmethod
    def count(self) -> int:
        """Return the number of stored interactions"""

    @abstractmethod
    def clear(self) -> None:
        """
        Delete every stored interaction. Clearing an empty store succeeds.

        Raises:
            StorageError: If a deletion fails
        """
