"""
Core module for GridBrickLab.

This module contains the resolution engine and the boundary-condition machinery.
"""

from .assembly import BoundaryReport, assemble, check_boundary_conditions
from .boundary import (
    BoundaryCondition,
    ConnectTwoObjects,
    NoBoundaryCondition,
    NoInitialCondition,
    NoTerminalCondition,
    StartEqualStop,
)
from .catalog_loader import load_catalog
from .cuts import CUT_CONSTANT_ID, SimpleSingleCuts
from .errors import (
    AssemblyError,
    CatalogError,
    ConfigError,
    DomainError,
    ProblemError,
    UnresolvedRecordsError,
)
from .ids import WHICHCONCEPT, WHICHINSTANCE, C, Id, RecordKey, VariantKey
from .interfaces import Problem, RecordHandler, StateBearing
from .problem import SparseProblem
from .records import DataRecord, check_key, get_field, get_reference
from .registry import HandlerRegistry
from .resolver import ResolutionResult, ResolverConfig, get_model_objects, resolve
from .states import StateVariable, StateVariableRef, has_state_variables
from .timeindex import TimePeriod, iso_year_start, is_iso_year_start

__all__ = [
    # Errors
    "ConfigError",
    "DomainError",
    "UnresolvedRecordsError",
    "AssemblyError",
    "ProblemError",
    "CatalogError",
    # Identity
    "Id",
    "VariantKey",
    "RecordKey",
    "C",
    "WHICHCONCEPT",
    "WHICHINSTANCE",
    # Records
    "DataRecord",
    "get_field",
    "get_reference",
    "check_key",
    "load_catalog",
    # Interfaces
    "RecordHandler",
    "StateBearing",
    "Problem",
    # Registry and resolver
    "HandlerRegistry",
    "ResolverConfig",
    "ResolutionResult",
    "resolve",
    "get_model_objects",
    # State variables
    "StateVariable",
    "StateVariableRef",
    "has_state_variables",
    # Problem
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
    # Assembly
    "assemble",
    "check_boundary_conditions",
    "BoundaryReport",
    # Time
    "TimePeriod",
    "iso_year_start",
    "is_iso_year_start",
]
