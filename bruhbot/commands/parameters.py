"""Parameter types and their separation policies."""

from __future__ import annotations

import logging
import math
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from .values import (
    DecimalValue,
    IntegerValue,
    MissingFirstQuotation,
    MissingLastQuotation,
    ParameterError,
    ParameterValue,
    StringValue,
    WildcardValue,
)

logger = logging.getLogger(__name__)

QUOTE = '"'
ESCAPE = "\\"

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
_DECIMAL_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

SplitResult = Union[tuple[str, str], ParameterError]


class SeparationPolicy(Enum):
    """How a parameter is cut out of the remaining argument text.

    ``QUOTATION_MARKS`` parameters must be wrapped in double quotes.
    ``OPTIONAL_QUOTATION_MARKS`` parameters use quotes when the text starts
    with one and otherwise end at the first unescaped space. ``SPACES``
    parameters always end at the first space.

    Inside quotes a literal quotation mark is escaped as ``\\"`` and a literal
    backslash as ``\\\\``.
    """

    QUOTATION_MARKS = "quotation_marks"
    OPTIONAL_QUOTATION_MARKS = "optional_quotation_marks"
    SPACES = "spaces"


def split_quoted(text: str) -> SplitResult:
    """Cut a quoted lexeme from the start of ``text``.

    Inside the quotes ``\\"`` stands for a quotation mark and ``\\\\`` for a
    backslash; any other backslash is kept as is. Returns ``(lexeme, rest)``
    with escapes resolved, or the error describing which quotation mark is
    missing.
    """
    if not text.startswith(QUOTE):
        logger.debug(f"No opening quotation mark in '{text}'")
        return MissingFirstQuotation()

    chars: list[str] = []
    index = 1
    while index < len(text):
        char = text[index]
        if char == ESCAPE and text[index + 1 : index + 2] in (QUOTE, ESCAPE):
            chars.append(text[index + 1])
            index += 2
            continue
        if char == QUOTE:
            return "".join(chars).strip(), text[index + 1 :].strip()
        chars.append(char)
        index += 1

    logger.debug(f"No closing quotation mark in '{text}'")
    return MissingLastQuotation()


def split_spaces(text: str, allow_escapes: bool = False) -> tuple[str, str]:
    """Cut everything up to the first space from ``text``.

    With ``allow_escapes`` a space preceded by a backslash does not end the
    lexeme, and ``\\ `` is unescaped to a plain space.
    """
    index = text.find(" ")
    if allow_escapes:
        while index > 0 and text[index - 1] == ESCAPE:
            index = text.find(" ", index + 1)

    if index == -1:
        lexeme, rest = text, ""
    else:
        lexeme, rest = text[:index], text[index:]

    if allow_escapes:
        lexeme = lexeme.replace(ESCAPE + " ", " ")
    return lexeme.strip(), rest.strip()


@dataclass(frozen=True)
class ParameterType(ABC):
    """A kind of parameter a command can declare.

    Subclasses provide validation, the user-facing message shown when
    validation fails, and the conversion to a ``ParameterValue``. Splitting
    follows ``separation_policy`` unless ``split`` is overridden.
    """

    name: str = field(init=False, default="Parameter")
    separation_policy: SeparationPolicy = field(init=False, default=SeparationPolicy.OPTIONAL_QUOTATION_MARKS)

    @abstractmethod
    def validate(self, lexeme: str) -> bool:
        """Check that ``lexeme`` represents a valid instance of this type."""

    @abstractmethod
    def bad_parameter_message(self) -> str:
        pass

    @abstractmethod
    def to_value(self, lexeme: str) -> ParameterValue:
        pass

    def split(self, remaining: str) -> SplitResult:
        policy = self.separation_policy
        if policy is SeparationPolicy.QUOTATION_MARKS:
            return split_quoted(remaining)
        if policy is SeparationPolicy.OPTIONAL_QUOTATION_MARKS:
            if remaining.startswith(QUOTE):
                return split_quoted(remaining)
            return split_spaces(remaining, allow_escapes=True)
        if policy is SeparationPolicy.SPACES:
            return split_spaces(remaining)
        raise ValueError(f"Unknown separation policy: {policy}")


@dataclass(frozen=True)
class StringType(ParameterType):
    """Free text. With ``allow_spaces`` the text must be quoted."""

    allow_spaces: bool = True

    def __post_init__(self) -> None:
        if self.allow_spaces:
            object.__setattr__(self, "name", "String (quotation mark-separated)")
            object.__setattr__(self, "separation_policy", SeparationPolicy.QUOTATION_MARKS)
        else:
            object.__setattr__(self, "name", "String (quotation mark/space-separated)")

    def validate(self, lexeme: str) -> bool:
        return True

    def bad_parameter_message(self) -> str:
        return "The argument could not be read as text."

    def to_value(self, lexeme: str) -> StringValue:
        return StringValue(lexeme)


@dataclass(frozen=True)
class KeywordType(ParameterType):
    """One word out of a fixed set."""

    words: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "words", frozenset(self.words))
        object.__setattr__(self, "name", f"Keyword ({self._quoted_words()})")

    def _quoted_words(self) -> str:
        return ", ".join(f'"{word}"' for word in sorted(self.words))

    def validate(self, lexeme: str) -> bool:
        return lexeme.strip() in self.words

    def bad_parameter_message(self) -> str:
        return f"Invalid keyword. Possible values are: {self._quoted_words()}"

    def to_value(self, lexeme: str) -> StringValue:
        return StringValue(lexeme.strip())


@dataclass(frozen=True)
class IntegerType(ParameterType):
    name: str = field(init=False, default="Integer")

    def validate(self, lexeme: str) -> bool:
        return _INTEGER_PATTERN.fullmatch(lexeme) is not None

    def bad_parameter_message(self) -> str:
        return "The argument cannot be interpreted as an integer of any sort."

    def to_value(self, lexeme: str) -> IntegerValue:
        return IntegerValue(int(lexeme))


@dataclass(frozen=True)
class DecimalType(ParameterType):
    name: str = field(init=False, default="Decimal number")

    def validate(self, lexeme: str) -> bool:
        # Exponents past the float range overflow to inf
        return _DECIMAL_PATTERN.fullmatch(lexeme) is not None and math.isfinite(float(lexeme))

    def bad_parameter_message(self) -> str:
        return "The argument cannot be interpreted as a decimal number of any sort."

    def to_value(self, lexeme: str) -> DecimalValue:
        return DecimalValue(float(lexeme))


@dataclass(frozen=True)
class WildcardType(ParameterType):
    """Takes whatever text is left, including nothing at all."""

    name: str = field(init=False, default="Anything")

    def validate(self, lexeme: str) -> bool:
        return True

    def bad_parameter_message(self) -> str:
        return "There's no way to get this message"

    def to_value(self, lexeme: str) -> WildcardValue:
        return WildcardValue(lexeme)

    def split(self, remaining: str) -> SplitResult:
        return remaining, ""
