"""
GridBrickLab - Declarative model building for energy-system scheduling

GridBrickLab turns a flat collection of named, cross-referencing declarative
records into typed model objects, and stitches the state variables of those
objects together across time and scenario seams with boundary conditions.

Key Features:
- **Registry**: (category, variant) keys map to handler functions, registered
  once at startup
- **Resolver**: Convergence loop that tolerates forward references and reports
  unresolvable records with their missing dependencies
- **Boundary Conditions**: Cyclic (start equals stop), bridges between two
  objects, and exemptions for objects without a real condition
- **Single-cut Decomposition**: Benders future-cost surrogate with a fixed
  number of preallocated cut rows

Quick Start:
    ```python
    from datetime import datetime
    from gridbricklab import DataRecord, Id, default_registry, resolve

    records = [
        DataRecord("TimeIndex", "RangeTimeIndex", "Hourly",
                   {"Start": datetime(2024, 1, 1), "Steps": 24, "Delta": "OneHour"}),
        DataRecord("TimeDelta", "MsTimeDelta", "OneHour", {"Period": "1h"}),
    ]
    result = resolve(records, default_registry())
    index = result.lowlevel[Id("TimeIndex", "Hourly")]
    ```

Extending the System:
    To add a new model object type:
    1. Write a handler `(toplevel, lowlevel, key, value) -> (ok, deps)`
    2. Register it on the registry under a new (category, variant) key
    3. Implement `get_state_variables()`/`get_horizon()` if it carries state
"""

# Version information
__version__ = "0.1.0"
__description__ = "Declarative model building for energy-system scheduling"

from .core import (
    CUT_CONSTANT_ID,
    AssemblyError,
    BoundaryCondition,
    BoundaryReport,
    C,
    CatalogError,
    ConfigError,
    ConnectTwoObjects,
    DataRecord,
    DomainError,
    HandlerRegistry,
    Id,
    NoBoundaryCondition,
    NoInitialCondition,
    NoTerminalCondition,
    Problem,
    ProblemError,
    RecordKey,
    ResolutionResult,
    ResolverConfig,
    SimpleSingleCuts,
    SparseProblem,
    StartEqualStop,
    StateBearing,
    StateVariable,
    StateVariableRef,
    UnresolvedRecordsError,
    VariantKey,
    assemble,
    check_boundary_conditions,
    get_model_objects,
    load_catalog,
    resolve,
)
from .handlers import default_registry, register_defaults

__all__ = [
    # Errors
    "ConfigError",
    "DomainError",
    "UnresolvedRecordsError",
    "AssemblyError",
    "ProblemError",
    "CatalogError",
    # Identity and records
    "Id",
    "VariantKey",
    "RecordKey",
    "C",
    "DataRecord",
    "load_catalog",
    # Registry and resolution
    "HandlerRegistry",
    "register_defaults",
    "default_registry",
    "ResolverConfig",
    "ResolutionResult",
    "resolve",
    "get_model_objects",
    "assemble",
    "check_boundary_conditions",
    "BoundaryReport",
    # State variables and problem
    "StateBearing",
    "StateVariable",
    "StateVariableRef",
    "Problem",
    "SparseProblem",
    # Boundary conditions
    "BoundaryCondition",
    "NoInitialCondition",
    "NoTerminalCondition",
    "NoBoundaryCondition",
    "StartEqualStop",
    "ConnectTwoObjects",
    "SimpleSingleCuts",
    "CUT_CONSTANT_ID",
    # Version info
    "__version__",
    "__description__",
]
