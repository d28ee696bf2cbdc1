"""Parameter values and parameter errors.

Parsing a slot yields exactly one ``ParameterResult``: either a
``ParameterValue`` holding the typed value, or a ``ParameterError`` explaining
why the slot could not be read. Both families are closed; code that consumes
them should handle every member.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from .parameters import ParameterType


@dataclass(frozen=True)
class StringValue:
    value: str

    @property
    def value_str(self) -> str:
        escaped = self.value.replace("\\", "\\\\").replace('"', '\\"')
        return '"' + escaped + '"'


@dataclass(frozen=True)
class IntegerValue:
    value: int

    @property
    def value_str(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class DecimalValue:
    value: float

    @property
    def value_str(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class WildcardValue:
    value: str

    @property
    def value_str(self) -> str:
        return self.value


ParameterValue = Union[StringValue, IntegerValue, DecimalValue, WildcardValue]
PARAMETER_VALUE_TYPES = (StringValue, IntegerValue, DecimalValue, WildcardValue)


@dataclass(frozen=True)
class MissingParameter:
    """The user forgot a parameter, or earlier ones swallowed too much text."""

    @property
    def user_message(self) -> str:
        return "This argument is missing. Perhaps there's been issues reading the previous ones?"


@dataclass(frozen=True)
class MissingFirstQuotation:
    @property
    def user_message(self) -> str:
        return 'Argument is missing quotations. Make sure to surround the parameter with "!'


@dataclass(frozen=True)
class MissingLastQuotation:
    @property
    def user_message(self) -> str:
        return 'Argument is missing the last quotation. Make sure to surround the parameter with "!'


@dataclass(frozen=True)
class BadParameter:
    """The lexeme was split correctly but is not valid for its type."""

    parameter_type: ParameterType

    @property
    def user_message(self) -> str:
        return self.parameter_type.bad_parameter_message()


@dataclass(frozen=True)
class ExceptionThrown:
    exception: Exception = field(compare=False)

    @property
    def user_message(self) -> str:
        return (
            f"An exception was thrown during parameter parsing ({self.exception}).\n"
            "You should probably let the bot owner know about this."
        )


@dataclass(frozen=True)
class GenericError:
    description: str

    @property
    def user_message(self) -> str:
        return self.description


ParameterError = Union[
    MissingParameter,
    MissingFirstQuotation,
    MissingLastQuotation,
    BadParameter,
    ExceptionThrown,
    GenericError,
]
PARAMETER_ERROR_TYPES = (
    MissingParameter,
    MissingFirstQuotation,
    MissingLastQuotation,
    BadParameter,
    ExceptionThrown,
    GenericError,
)

ParameterResult = Union[ParameterValue, ParameterError]


def is_error(result: ParameterResult) -> bool:
    if isinstance(result, PARAMETER_ERROR_TYPES):
        return True
    if isinstance(result, PARAMETER_VALUE_TYPES):
        return False
    raise TypeError(f"Unknown parameter result: {result!r}")
