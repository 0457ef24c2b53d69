"""
Handler registry setup for GridBrickLab.
"""

from gridbricklab.core.ids import C, VariantKey
from gridbricklab.core.registry import HandlerRegistry

# Boundary conditions
from .boundary import (
    include_no_boundary_condition,
    include_no_initial_condition,
    include_no_terminal_condition,
    include_simple_single_cuts,
    include_start_equal_stop,
)

# Time primitives
from .time import (
    include_ms_time_delta,
    include_range_time_index,
    include_scenario_time_period,
    include_simulation_time_period,
    include_vector_time_index,
)


def register_defaults(registry: HandlerRegistry) -> HandlerRegistry:
    """
    Register all built-in handlers in the given registry.

    Registered Variants:
        TimeIndex:
            - 'VectorTimeIndex': explicit strictly increasing timestamps
            - 'RangeTimeIndex': evenly spaced (Start, Steps, Delta)
        TimeDelta:
            - 'MsTimeDelta': positive duration at millisecond resolution
        TimePeriod:
            - 'ScenarioTimePeriod': window of scenario data (ISO year starts)
            - 'SimulationTimePeriod': span the model is run over
        BoundaryCondition:
            - 'StartEqualStop', 'NoInitialCondition', 'NoTerminalCondition',
              'NoBoundaryCondition', 'SimpleSingleCuts'

    Note:
        This is the only place built-in handlers are registered; importing
        modules never registers anything. Call it once at startup. Handlers
        for concrete model objects (balances, flows, storages) are registered
        by the application on the same registry.

    Raises:
        ConfigError: If any of the variants is already registered
    """
    # Time primitives
    registry.register(VariantKey(C.TIMEINDEX, "VectorTimeIndex"), include_vector_time_index)
    registry.register(VariantKey(C.TIMEINDEX, "RangeTimeIndex"), include_range_time_index)
    registry.register(VariantKey(C.TIMEDELTA, "MsTimeDelta"), include_ms_time_delta)
    registry.register(
        VariantKey(C.TIMEPERIOD, "ScenarioTimePeriod"), include_scenario_time_period
    )
    registry.register(
        VariantKey(C.TIMEPERIOD, "SimulationTimePeriod"), include_simulation_time_period
    )

    # Boundary conditions
    registry.register(
        VariantKey(C.BOUNDARYCONDITION, "StartEqualStop"), include_start_equal_stop
    )
    registry.register(
        VariantKey(C.BOUNDARYCONDITION, "NoInitialCondition"), include_no_initial_condition
    )
    registry.register(
        VariantKey(C.BOUNDARYCONDITION, "NoTerminalCondition"),
        include_no_terminal_condition,
    )
    registry.register(
        VariantKey(C.BOUNDARYCONDITION, "NoBoundaryCondition"),
        include_no_boundary_condition,
    )
    registry.register(
        VariantKey(C.BOUNDARYCONDITION, "SimpleSingleCuts"), include_simple_single_cuts
    )
    return registry


def default_registry() -> HandlerRegistry:
    """A fresh registry populated with the built-in handlers."""
    return register_defaults(HandlerRegistry())
