"""
Plugin registry exceptions.
"""


class UnknownPluginError(ValueError):
    """
    Raised when REEXEC_STRATEGIES names a plugin nobody registered.

    Attributes:
        name: The unknown plugin name
        available: Names that are registered
    """

    def __init__(self, name: str, available: list[str]) -> None:
        self.name = name
        self.available = available
        super().__init__(
            f"No re-execution plugin registered for '{name}'. "
            f"Available: {', '.join(available)}"
        )
