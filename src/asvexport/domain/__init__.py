"""
Domain Models and Types

This module contains the core domain models and enumerations used throughout the exporter.

Models:
- PackExportConfig: `pack` mode configuration file
- JsonExportConfig: `json` batch mode configuration file and its target descriptors
- PackFilter / PackOptions: content pack selection and inclusion flags
- ReadingOptions: raw archive reader sections
- Invocation: routed command line

Enums:
- Mode: command-line modes
- ExportTarget: single-save ad-hoc targets
- BatchTarget: configuration-file batch targets
- FailurePolicy: continue or abort after a failed batch target
"""

from .enums import BatchTarget, ExportTarget, FailurePolicy, Mode
from .models import (
    ClassDescriptor,
    Invocation,
    JsonExportConfig,
    PackExportConfig,
    PackFilter,
    PackOptions,
    ReadingOptions,
    TargetDescriptor,
    TribeDescriptor,
    WildDescriptor,
)

__all__ = [
    "PackExportConfig", "JsonExportConfig", "TargetDescriptor", "TribeDescriptor",
    "ClassDescriptor", "WildDescriptor", "PackFilter", "PackOptions", "ReadingOptions",
    "Invocation", "Mode", "ExportTarget", "BatchTarget", "FailurePolicy"
]
