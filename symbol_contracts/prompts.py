"""Resolution of contract options from CLI inputs or interactive prompts."""

from __future__ import annotations

from typing import Any, Callable

import typer

from symbol_contracts.shared.errors import ParameterError
from symbol_contracts.shared.validation import ValidationResult


def resolve_option(
    inputs: dict[str, Any],
    name: str,
    default: Any = None,
    prompt: str = "",
    interactive: bool = True,
    hide_input: bool = False,
    validator: Callable[[Any], ValidationResult] | None = None,
) -> Any:
    """Return ``inputs[name]`` or ask for it.

    Without a value and in non-interactive mode the default is used; a
    missing required option raises ``ParameterError``. When a validator is
    given its normalized value is returned and its error message is raised.
    """
    value = inputs.get(name)
    if value is None or value == "":
        if interactive:
            value = typer.prompt(
                prompt or name,
                default=default,
                hide_input=hide_input,
                show_default=not hide_input,
            )
        elif default is not None:
            value = default
        else:
            raise ParameterError(f"Missing required option --{name}")

    if validator is None:
        return value

    result = validator(value)
    if not result.is_valid:
        raise ParameterError(result.error_message or f"Invalid value for --{name}")
    return result.normalized_value


def confirm_option(question: str, default: bool = False, interactive: bool = True) -> bool:
    if not interactive:
        return default
    return typer.confirm(question, default=default)
