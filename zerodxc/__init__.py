"""
ZeroDXC: significance of windowed zero-delay cross-correlation.

This package provides tools for:
- Correlation diagrams over sliding windows of several widths
- IAAFT surrogate generation
- Monte-Carlo p-value diagrams, sequential or multi-threaded
- Loading sequence tables and writing diagrams
"""

__version__ = "1.0.0"

# Import main modules for convenient access
from . import diagram
from . import surrogates
from . import pvalue
from . import io

# Import key functions for direct access
from .diagram import (
    WindowSpec,
    compute_diagram,
    window_positions,
    check_windowing,
)

from .surrogates import (
    SurrogateInvariants,
    initialize_surrogate_generation,
    generate_iaaft_surrogate,
    update_pvalue_counts,
    finalize_pvalue_diagram,
)

from .pvalue import (
    XCResult,
    compute_pvalue_diagram,
    run_xc_workflow,
)

from .config import (
    RunMode,
    XCSettings,
    resolve_run_mode,
)

from .io import (
    SequenceStore,
    load_sequences,
    write_diagram,
)

from .exceptions import (
    ZeroDXCError,
    ConfigurationError,
    InputConsistencyError,
    WindowingError,
    OutputError,
)

__all__ = [
    'diagram',
    'surrogates',
    'pvalue',
    'io',
    # Diagram
    'WindowSpec',
    'compute_diagram',
    'window_positions',
    'check_windowing',
    # Surrogates
    'SurrogateInvariants',
    'initialize_surrogate_generation',
    'generate_iaaft_surrogate',
    'update_pvalue_counts',
    'finalize_pvalue_diagram',
    # P-values
    'XCResult',
    'compute_pvalue_diagram',
    'run_xc_workflow',
    # Configuration
    'RunMode',
    'XCSettings',
    'resolve_run_mode',
    # I/O
    'SequenceStore',
    'load_sequences',
    'write_diagram',
    # Errors
    'ZeroDXCError',
    'ConfigurationError',
    'InputConsistencyError',
    'WindowingError',
    'OutputError',
]
