"""Render intents and mutually-exclusive option handling.

A run produces one of three sheets:

    cut    -- overlay outlines and key cut-outs (the cutter's file)
    print  -- registration marks and legends (the printer's file)
    all    -- everything on one sheet (proofing)

The output file name is ``{file_prefix}-overlay-{mode}.pdf``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

MODES = ("cut", "print", "all")


class ConfigurationConflictError(Exception):
    """Raised when options from one exclusive group are combined, or a
    required group has no member set."""

    pass


@dataclass(frozen=True)
class RenderIntents:
    """What to draw on the sheet."""

    mode: str
    outlines: bool
    registration: bool
    legends: bool


MODE_INTENTS: dict[str, RenderIntents] = {
    "cut": RenderIntents("cut", outlines=True, registration=False, legends=False),
    "print": RenderIntents("print", outlines=False, registration=True, legends=True),
    "all": RenderIntents("all", outlines=True, registration=True, legends=True),
}


def _is_set(options: Mapping[str, Any], name: str) -> bool:
    return bool(options.get(name))


def conflicting_options(
    options: Mapping[str, Any],
    names: Iterable[str],
    required: bool = False,
) -> str | None:
    """Check that at most one option of *names* is set.

    Parameters
    ----------
    options : Mapping[str, Any]
        Parsed options; an option counts as set when its value is truthy.
    names : Iterable[str]
        The exclusive group.
    required : bool
        Also require exactly one member to be set.

    Returns
    -------
    str | None
        The option that is set, or ``None``.

    Raises
    ------
    ConfigurationConflictError
        Naming the first two conflicting options, or the whole group
        when a required group is empty.
    """
    names = list(names)
    chosen = [name for name in names if _is_set(options, name)]
    if len(chosen) > 1:
        raise ConfigurationConflictError(
            f"Conflicting options '{chosen[0]}' and '{chosen[1]}'."
        )
    if required and not chosen:
        raise ConfigurationConflictError(
            f"No option in group set; choose one of: "
            f"{', '.join(repr(n) for n in names)}."
        )
    return chosen[0] if chosen else None


def resolve_intents(
    options: Mapping[str, Any],
    models: Iterable[str],
    default_model: str,
) -> tuple[RenderIntents, str]:
    """Validate both option groups and return ``(intents, model_name)``.

    Parameters
    ----------
    options : Mapping[str, Any]
        Parsed options keyed by mode and model names.
    models : Iterable[str]
        Overlay model names (each is a flag).
    default_model : str
        Model used when no model flag is set.
    """
    mode = conflicting_options(options, MODES, required=True)
    model = conflicting_options(options, models)
    return MODE_INTENTS[mode], model or default_model


def output_filename(file_prefix: str, mode: str) -> str:
    """``{file_prefix}-overlay-{mode}.pdf``, e.g. ``voyager-overlay-cut.pdf``."""
    if mode not in MODES:
        raise ValueError(f"mode must be one of {MODES}, got {mode!r}")
    return f"{file_prefix}-overlay-{mode}.pdf"
