from kubernix.local.supervisor import Process, Stoppable


class Component(Stoppable):
    """A cluster service backed by a single supervised process."""

    def __init__(self, process: Process) -> None:
        self.process = process

    @property
    def pid(self) -> int:
        return self.process.pid

    def stop(self) -> None:
        self.process.stop()
