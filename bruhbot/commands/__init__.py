"""Command system: parameters, argument parsing and execution."""

from .decorators import CommandDeclaration, command
from .execution import (
    CommandInformation,
    CommandRun,
    ExecutionError,
    ExecutionEvent,
    RunOutcome,
    RunState,
)
from .parameters import (
    DecimalType,
    IntegerType,
    KeywordType,
    ParameterType,
    SeparationPolicy,
    StringType,
    WildcardType,
)
from .parsers import ArgumentParser, parse_arguments
from .values import (
    BadParameter,
    DecimalValue,
    ExceptionThrown,
    GenericError,
    IntegerValue,
    MissingFirstQuotation,
    MissingLastQuotation,
    MissingParameter,
    ParameterError,
    ParameterResult,
    ParameterValue,
    StringValue,
    WildcardValue,
    is_error,
)

__all__ = [
    "ArgumentParser",
    "BadParameter",
    "CommandDeclaration",
    "CommandInformation",
    "CommandRun",
    "DecimalType",
    "DecimalValue",
    "ExceptionThrown",
    "ExecutionError",
    "ExecutionEvent",
    "GenericError",
    "IntegerType",
    "IntegerValue",
    "KeywordType",
    "MissingFirstQuotation",
    "MissingLastQuotation",
    "MissingParameter",
    "ParameterError",
    "ParameterResult",
    "ParameterType",
    "ParameterValue",
    "RunOutcome",
    "RunState",
    "SeparationPolicy",
    "StringType",
    "StringValue",
    "WildcardType",
    "WildcardValue",
    "command",
    "is_error",
    "parse_arguments",
]
