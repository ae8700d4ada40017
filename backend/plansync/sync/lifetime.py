from plansync.errors import StaleContextError


class Lifetime:
    """Liveness token for whoever launched a piece of async work."""

    def __init__(self, name: str = "component"):
        self.name = name
        self._alive = True

    @property
    def alive(self) -> bool:
        return self._alive

    def end(self) -> None:
        self._alive = False

    def ensure_alive(self) -> None:
        if not self._alive:
            raise StaleContextError(f"{self.name} is no longer available", details={"owner": self.name})
