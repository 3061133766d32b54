"""mbforge - Mount&Blade style module data parser and validator."""

from mbforge.loader import EntityKind, ModuleData, load_module, read_entities, write_entities
from mbforge.logger import LogConfig, ReportLogger, VerboseLevel
from mbforge.validator import (
    DataValidator,
    ValidationError,
    ValidationErrorKind,
    ValidationResult,
    validate,
)

__version__ = "0.1.0"

__all__ = [
    "DataValidator",
    "EntityKind",
    "LogConfig",
    "ModuleData",
    "ReportLogger",
    "ValidationError",
    "ValidationErrorKind",
    "ValidationResult",
    "VerboseLevel",
    "load_module",
    "read_entities",
    "validate",
    "write_entities",
]
