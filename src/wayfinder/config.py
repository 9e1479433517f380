"""Router configuration.

RouterConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(prefix="", default_path="/home")
    """

    # URL scheme — a non-empty prefix selects hash-fragment routing,
    # an empty prefix selects history-API routing.
    prefix: str = "#!"

    # Path dispatched by the URL router when nothing matches
    default_path: str | None = None

    # go() asks the history writer to rewrite the URL after commit
    go_updates_location: bool = True

    # Navigation-by-name starts from the current state's params
    inherit_params: bool = True

    @property
    def hash_mode(self) -> bool:
        """True when URLs live in the fragment (``#!/path``)."""
        return bool(self.prefix)
