"""
Agent dispatch.

Maps an agent type to the analysis routine behind it. Payloads are plain
JSON objects; options tune the routine (max results, weights, rates).
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Mapping, Optional

from core.comp_engine import AdjustmentCalculator, AdjustmentRates, CompSelector
from core.market import analyze_market
from core.numbers import Number, parse_number

from .data_validator import validate_property_data
from .errors import AgentInputError, UnknownAgentError
from .qc_reviewer import review_report


logger = logging.getLogger(__name__)


class AgentType(Enum):
    DATA_VALIDATOR = "data-validator"
    COMP_SELECTOR = "comp-selector"
    QC_REVIEWER = "qc-reviewer"
    MARKET_ANALYZER = "market-analyzer"


DEFAULT_OPTIONS: dict[str, Any] = {
    "maxResults": 10,
}


def _require(data: Mapping[str, Any], *keys: str) -> None:
    missing = [k for k in keys if data.get(k) is None]
    if missing:
        raise AgentInputError(f"Missing required input: {', '.join(missing)}")


def _require_object(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key)
    if not isinstance(value, Mapping):
        raise AgentInputError(f"Input '{key}' must be an object")
    return value


def _require_list(data: Mapping[str, Any], key: str) -> list:
    value = data.get(key)
    if not isinstance(value, list):
        raise AgentInputError(f"Input '{key}' must be a list")
    for index, entry in enumerate(value):
        if not isinstance(entry, Mapping):
            raise AgentInputError(f"Input '{key}[{index}]' must be an object")
    return value


def _check_optional(data: Mapping[str, Any], key: str, kind: type, label: str) -> None:
    value = data.get(key)
    if value is not None and not isinstance(value, kind):
        raise AgentInputError(f"Input '{key}' must be {label}")


def _numeric_option(options: Mapping[str, Any], key: str) -> dict[str, Number]:
    """A mapping option whose values must all parse as numbers."""
    raw = options.get(key) or {}
    if not isinstance(raw, Mapping):
        raise AgentInputError(f"Option '{key}' must be an object")

    parsed = {}
    for name, value in raw.items():
        number = parse_number(value)
        if number is None:
            raise AgentInputError(f"Option '{key}.{name}' must be a number")
        parsed[name] = number
    return parsed


def _run_data_validator(data: Mapping[str, Any], options: Mapping[str, Any]) -> dict:
    _check_optional(data, "description", str, "a string")
    _check_optional(data, "features", Mapping, "an object")
    return validate_property_data(data).to_dict()


def _run_comp_selector(data: Mapping[str, Any], options: Mapping[str, Any]) -> dict:
    _require(data, "subject", "comparables")
    subject = _require_object(data, "subject")
    comparables = _require_list(data, "comparables")

    try:
        max_results = int(options["maxResults"])
    except (TypeError, ValueError):
        raise AgentInputError("Option 'maxResults' must be an integer") from None
    if max_results < 1:
        raise AgentInputError("Option 'maxResults' must be at least 1")

    calculator = AdjustmentCalculator(AdjustmentRates.from_dict(_numeric_option(options, "adjustments")))
    selector = CompSelector(calculator=calculator, weights=_numeric_option(options, "weights"))
    result = selector.select(subject, comparables, max_results=max_results)

    output = result.to_dict()
    output["analysisDate"] = datetime.utcnow().isoformat()
    return output


def _run_qc_reviewer(data: Mapping[str, Any], options: Mapping[str, Any]) -> dict:
    _require(data, "report", "comparables")
    report = _require_object(data, "report")
    for key in ("description", "valueJustification"):
        _check_optional(report, key, str, "a string")
    _check_optional(report, "photos", list, "a list")
    _check_optional(report, "propertyFeatures", Mapping, "an object")
    comparables = _require_list(data, "comparables")
    for comp in comparables:
        _check_optional(comp, "adjustments", Mapping, "an object")
    property_record = _require_object(data, "property") if data.get("property") is not None else None
    return review_report(report, comparables, property_record=property_record).to_dict()


def _run_market_analyzer(data: Mapping[str, Any], options: Mapping[str, Any]) -> dict:
    _require(data, "location", "salesData")
    location = _require_object(data, "location")
    sales = _require_list(data, "salesData")
    return analyze_market(location, sales).to_dict()


AGENTS: dict[AgentType, Callable[[Mapping[str, Any], Mapping[str, Any]], dict]] = {
    AgentType.DATA_VALIDATOR: _run_data_validator,
    AgentType.COMP_SELECTOR: _run_comp_selector,
    AgentType.QC_REVIEWER: _run_qc_reviewer,
    AgentType.MARKET_ANALYZER: _run_market_analyzer,
}


def resolve_agent_type(agent_type: Any) -> AgentType:
    if isinstance(agent_type, AgentType):
        return agent_type
    try:
        return AgentType(agent_type)
    except ValueError:
        raise UnknownAgentError(str(agent_type)) from None


def run_agent(
    agent_type: Any,
    data: Mapping[str, Any],
    options: Optional[Mapping[str, Any]] = None,
) -> dict:
    """
    Run one agent over a payload.

    Args:
        agent_type: AgentType or its string value
        data: Agent payload
        options: Overrides merged over DEFAULT_OPTIONS

    Returns:
        The agent's JSON-ready result

    Raises:
        UnknownAgentError: for an unregistered agent type
        AgentInputError: for a malformed payload
    """
    resolved = resolve_agent_type(agent_type)
    if not isinstance(data, Mapping):
        raise AgentInputError("Agent payload must be an object")

    merged = {**DEFAULT_OPTIONS, **(options or {})}
    logger.info("Running %s agent", resolved.value)
    return AGENTS[resolved](data, merged)
