"""Theme collections from the local variables API."""

from __future__ import annotations

import logging
from typing import Any

from tokken.core.colors import figma_color_to_hex, round_half_up
from tokken.core.models import ThemeCollection, ThemeData, ThemeVariable

logger = logging.getLogger(__name__)


def format_variable_value(resolved_type: str | None, value: Any) -> Any:
    """Colour values become ``#rrggbb``, or ``#rrggbb (NN%)`` when translucent.

    Anything else (numbers, strings, booleans, aliases) passes through.
    """
    if resolved_type == "COLOR" and isinstance(value, dict) and "r" in value:
        hex_color = figma_color_to_hex(value)
        alpha = value.get("a")
        if alpha is not None and alpha < 1:
            return f"{hex_color} ({round_half_up(alpha * 100)}%)"
        return hex_color
    return value


def extract_themes(variables_response: dict[str, Any]) -> ThemeData:
    """Build theme collections from a ``/variables/local`` payload."""
    meta = variables_response.get("meta") or {}
    raw_collections: dict[str, Any] = meta.get("variableCollections") or {}
    raw_variables: dict[str, Any] = meta.get("variables") or {}

    collections: list[ThemeCollection] = []
    for collection in raw_collections.values():
        modes = collection.get("modes") or []
        mode_names = {mode.get("modeId"): mode.get("name") for mode in modes}

        theme_vars: list[ThemeVariable] = []
        for var_id in collection.get("variableIds") or []:
            variable = raw_variables.get(var_id)
            if not variable:
                continue
            resolved_type = variable.get("resolvedType")
            values_by_mode = {
                mode_names.get(mode_id) or mode_id: format_variable_value(resolved_type, value)
                for mode_id, value in (variable.get("valuesByMode") or {}).items()
            }
            theme_vars.append(
                ThemeVariable(
                    name=variable.get("name", ""),
                    type=resolved_type or "UNKNOWN",
                    values_by_mode=values_by_mode,
                )
            )

        theme_vars.sort(key=lambda v: v.name.casefold())
        collections.append(
            ThemeCollection(
                name=collection.get("name", ""),
                modes=[mode.get("name", "") for mode in modes],
                variables=theme_vars,
            )
        )

    logger.info(
        "Theme variables: %d collections, %d variables",
        len(collections),
        sum(len(c.variables) for c in collections),
    )
    return ThemeData(collections=collections)
