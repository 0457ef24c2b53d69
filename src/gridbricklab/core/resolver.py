"""
Resolution of declarative records into low-level values and top-level objects.

The resolver runs a convergence loop: every pass offers each pending record to
its handler, in input order. Records whose dependencies are not yet available
stay pending and are retried on the next pass, so forward references resolve
in at most as many passes as the longest dependency chain. When a pass makes
no progress, whatever is still pending is reported as a fatal error.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .errors import ConfigError, UnresolvedRecordsError
from .ids import Id, RecordKey
from .records import DataRecord

if TYPE_CHECKING:
    from .registry import HandlerRegistry

logger = logging.getLogger(__name__)


@dataclass
class ResolverConfig:
    """Configuration options for record resolution."""

    max_passes: int | None = None  # None = run until no progress
    log_dependencies: bool = False


@dataclass
class ResolutionResult:
    """
    Outcome of a successful resolution.

    Attributes:
        toplevel: Id -> fully constructed model object
        lowlevel: Id -> resolved primitive/shared value
        dependencies: Record key -> ids it reported as dependencies when it
            resolved (audit only)
        passes: Number of passes used
    """

    toplevel: dict[Id, Any] = field(default_factory=dict)
    lowlevel: dict[Id, Any] = field(default_factory=dict)
    dependencies: dict[RecordKey, list[Id]] = field(default_factory=dict)
    passes: int = 0


def _check_records(records: list[DataRecord], registry: HandlerRegistry) -> None:
    seen: set[RecordKey] = set()
    for record in records:
        if not isinstance(record, DataRecord):
            raise ConfigError(f"Expected DataRecord, got {type(record).__name__}")
        if record.key in seen:
            raise ConfigError("Duplicate record in input", record.key)
        seen.add(record.key)

    missing = registry.missing(r.variant_key for r in records)
    if missing:
        names = ", ".join(str(k) for k in missing)
        raise ConfigError(f"No handler registered for variant(s): {names}")


def resolve(
    records: Iterable[DataRecord],
    registry: HandlerRegistry,
    *,
    config: ResolverConfig | None = None,
) -> ResolutionResult:
    """
    Resolve records until every one is installed or no progress is made.

    Args:
        records: Declarative records; order only affects diagnostic order
        registry: Handler registry
        config: Optional resolver configuration

    Returns:
        ResolutionResult with both stores and the dependency audit

    Raises:
        ConfigError: Unknown variant, duplicate record, malformed record or a
            handler that wrote into a store while reporting failure
        UnresolvedRecordsError: Records still pending after a pass without
            progress
    """
    config = config or ResolverConfig()
    records = list(records)
    _check_records(records, registry)

    result = ResolutionResult()
    toplevel, lowlevel = result.toplevel, result.lowlevel
    pending: list[DataRecord] = records
    missing: dict[RecordKey, list[Id]] = {}

    while pending:
        if config.max_passes is not None and result.passes >= config.max_passes:
            raise UnresolvedRecordsError(
                {r.key: missing.get(r.key, []) for r in pending},
                f"Resolution stopped after max_passes={config.max_passes} "
                f"with {len(pending)} record(s) pending",
            )
        result.passes += 1
        still_pending: list[DataRecord] = []
        missing = {}

        for record in pending:
            key = record.key
            handler = registry.get(record.variant_key)
            sizes = (len(toplevel), len(lowlevel))
            ok, deps = handler(toplevel, lowlevel, key, record.value)
            deps = list(deps)

            if ok:
                result.dependencies[key] = deps
                if config.log_dependencies and deps:
                    logger.debug(
                        "%s resolved with dependencies: %s",
                        key,
                        ", ".join(str(d) for d in deps),
                    )
                continue

            if (len(toplevel), len(lowlevel)) != sizes:
                raise ConfigError(
                    "Handler modified a store while reporting unresolved", key
                )
            missing[key] = deps
            still_pending.append(record)

        logger.debug(
            "Resolution pass %d: %d resolved, %d pending",
            result.passes,
            len(pending) - len(still_pending),
            len(still_pending),
        )

        if len(still_pending) == len(pending):
            raise UnresolvedRecordsError({r.key: missing[r.key] for r in still_pending})
        pending = still_pending

    logger.info(
        "Resolved %d records in %d passes (%d top-level, %d low-level)",
        len(records),
        result.passes,
        len(toplevel),
        len(lowlevel),
    )
    return result


def get_model_objects(
    records: Iterable[DataRecord],
    registry: HandlerRegistry | None = None,
    *,
    validate: bool = True,
    config: ResolverConfig | None = None,
) -> dict[Id, Any]:
    """
    Resolve records, wait for all objects to be ready and check boundary conditions.

    Args:
        records: Declarative records
        registry: Handler registry (defaults to the built-in handlers)
        validate: Check that every state-bearing object has its initial and
            terminal conditions
        config: Optional resolver configuration

    Returns:
        The top-level store
    """
    from .assembly import assemble, check_boundary_conditions

    if registry is None:
        from gridbricklab.handlers.registry import default_registry

        registry = default_registry()

    result = resolve(records, registry, config=config)
    assemble(result.toplevel)
    if validate:
        check_boundary_conditions(result.toplevel).raise_for_errors()
    return result.toplevel
