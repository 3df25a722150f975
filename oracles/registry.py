"""Backend name -> ``OracleSuite`` factory lookup, fed by ``@register``."""

from __future__ import annotations

from typing import Callable

from models.config import OracleConfig
from oracles.base import OracleSuite

SuiteFactory = Callable[[OracleConfig], OracleSuite]

_BACKENDS: dict[str, SuiteFactory] = {}


def register(name: str) -> Callable[[SuiteFactory], SuiteFactory]:
    def _decorator(factory: SuiteFactory) -> SuiteFactory:
        _BACKENDS[name] = factory
        return factory

    return _decorator


def create_oracles(config: OracleConfig) -> OracleSuite:
    """Build the suite for ``config.backend``; ``KeyError`` if it is unknown."""
    # Built-in backends register themselves on import.
    import oracles.llm  # noqa: F401
    import oracles.mock  # noqa: F401

    try:
        factory = _BACKENDS[config.backend]
    except KeyError:
        raise KeyError(
            f"Unknown oracle backend '{config.backend}'. "
            f"Available: {', '.join(sorted(_BACKENDS))}."
        ) from None
    return factory(config)
