"""Argument parsing for text-triggered commands."""

import logging
from collections.abc import Sequence

from .parameters import ParameterType, WildcardType
from .values import (
    PARAMETER_ERROR_TYPES,
    BadParameter,
    ExceptionThrown,
    GenericError,
    MissingParameter,
    ParameterResult,
)

logger = logging.getLogger(__name__)


class ArgumentParser:
    """Splits an argument string into one result per expected parameter.

    The parser never stops early. Every expected slot gets exactly one
    result, so callers can point at the parameter that went wrong. Text left
    over once every slot is filled adds a trailing ``GenericError``.
    """

    def parse(self, text: str, expected: Sequence[ParameterType]) -> list[ParameterResult]:
        logger.info(f"Parsing parameters from string '{text}'")
        remaining = text.strip()
        results: list[ParameterResult] = []

        for parameter_type in expected:
            logger.debug(f"Parsing parameter '{parameter_type.name}'")

            if not remaining and not isinstance(parameter_type, WildcardType):
                logger.warning(
                    "Argument string is empty, this usually means previous parameters parsed incorrectly"
                )
                results.append(MissingParameter())
                continue

            try:
                outcome = parameter_type.split(remaining)
                if isinstance(outcome, PARAMETER_ERROR_TYPES):
                    logger.warning(f"Parameter '{parameter_type.name}' could not be split from '{remaining}'")
                    results.append(outcome)
                    continue

                lexeme, rest = outcome
                logger.debug(f"Parameter '{parameter_type.name}' splits as '{lexeme}' - '{rest}'")
                if not parameter_type.validate(lexeme):
                    logger.warning(f"Parameter '{parameter_type.name}' failed to validate '{lexeme}'")
                    results.append(BadParameter(parameter_type))
                    continue

                results.append(parameter_type.to_value(lexeme))
                remaining = rest
            except Exception as e:
                logger.warning(
                    f"Parameter '{parameter_type.name}' raised while parsing '{remaining}': {e}",
                    exc_info=True,
                )
                results.append(ExceptionThrown(e))

        if remaining:
            logger.warning(f"Argument string '{remaining}' left after parsing all parameters")
            results.append(GenericError("Missing parameters"))

        logger.info(f"Parsing of string '{text}' ended")
        return results


def parse_arguments(text: str, expected: Sequence[ParameterType]) -> list[ParameterResult]:
    """Shortcut for ``ArgumentParser().parse``."""
    return ArgumentParser().parse(text, expected)
