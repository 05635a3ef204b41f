"""Router configuration.

RouterConfig is a frozen dataclass — immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from dataclasses import dataclass

from switchyard.cors import CORSConfig


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(debug=True, cors=CORSConfig(max_age=600))
    """

    # Include error detail (diagnostics, tracebacks) in error bodies
    debug: bool = False

    # None disables CORS entirely
    cors: CORSConfig | None = None

    @property
    def cors_enabled(self) -> bool:
        return self.cors is not None
