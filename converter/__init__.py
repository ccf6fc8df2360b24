"""
Conversion core for Recast

Dimension math, format catalog, selection state, the single-image
conversion engine and the sequential batch coordinator.
"""

from .batch import BatchCoordinator
from .engine import ConversionEngine
from .errors import (
    BatchAborted,
    BatchCancelled,
    CodecFailure,
    EmptySelection,
    InvalidInput,
    InvalidPolicy,
    RecastError,
)
from .models import (
    BatchOutcome,
    BatchSummary,
    ConversionResult,
    Custom,
    Dimensions,
    EncodingOptions,
    LoadedImage,
    NoResize,
    OutputFormat,
    ResizePolicy,
    Scale,
)
from .selection import SelectionSet

__all__ = [
    'BatchAborted', 'BatchCancelled', 'BatchCoordinator', 'BatchOutcome',
    'BatchSummary', 'CodecFailure', 'ConversionEngine', 'ConversionResult',
    'Custom', 'Dimensions', 'EmptySelection', 'EncodingOptions', 'InvalidInput',
    'InvalidPolicy', 'LoadedImage', 'NoResize', 'OutputFormat', 'RecastError',
    'ResizePolicy', 'Scale', 'SelectionSet',
]
