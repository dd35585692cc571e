from abc import ABC, abstractmethod


class Stoppable(ABC):
    """Something which is running and can be asked to stop."""

    @abstractmethod
    def stop(self) -> None:
        ...


# Launchers return their running component as a Startable.
Startable = Stoppable
