# tests/test_request_parser.py
from __future__ import annotations

import json

import pytest

from functions.orchestrator.request_parser import (
    INVALID_BODY_MESSAGE,
    INVALID_DIRECTION_MESSAGE,
    InvalidScalingRequest,
    parse_scaling_request,
)
from functions.orchestrator.tier_catalog import ScaleDirection

FULL_QUERY = {"resourceGroup": "rg1", "mongoCluster": "c1", "direction": "up"}


def test_query_only() -> None:
    req = parse_scaling_request(FULL_QUERY)
    assert req.resource_group == "rg1"
    assert req.cluster_name == "c1"
    assert req.direction is ScaleDirection.UP


def test_body_only() -> None:
    body = json.dumps({"resourceGroup": "rg2", "mongoCluster": "c2", "direction": "down"}).encode()
    req = parse_scaling_request({}, body)
    assert (req.resource_group, req.cluster_name, req.direction) == ("rg2", "c2", ScaleDirection.DOWN)


def test_query_wins_and_body_fills_only_missing_fields() -> None:
    body = json.dumps({"resourceGroup": "rg-body", "mongoCluster": "c-body", "direction": "down"})
    req = parse_scaling_request({"resourceGroup": "rg-query", "direction": "up"}, body)

    assert req.resource_group == "rg-query"
    assert req.cluster_name == "c-body"
    assert req.direction is ScaleDirection.UP


def test_empty_query_value_is_filled_from_body() -> None:
    body = '{"mongoCluster": "c-body"}'
    req = parse_scaling_request({"resourceGroup": "rg1", "mongoCluster": "", "direction": "up"}, body)
    assert req.cluster_name == "c-body"


def test_body_is_ignored_when_query_is_complete() -> None:
    req = parse_scaling_request(FULL_QUERY, b"{not json")
    assert req.cluster_name == "c1"


@pytest.mark.parametrize("body", [b"{not json", b"[1, 2]", b'"up"', b"\xff\xfe"])
def test_unparseable_body_is_invalid(body: bytes) -> None:
    with pytest.raises(InvalidScalingRequest) as exc_info:
        parse_scaling_request({"resourceGroup": "rg1"}, body)
    assert exc_info.value.message == INVALID_BODY_MESSAGE


def test_non_string_body_field_is_invalid() -> None:
    with pytest.raises(InvalidScalingRequest) as exc_info:
        parse_scaling_request({}, '{"resourceGroup": "rg1", "mongoCluster": "c1", "direction": 1}')
    assert exc_info.value.message == INVALID_BODY_MESSAGE


def test_missing_direction_is_named() -> None:
    with pytest.raises(InvalidScalingRequest) as exc_info:
        parse_scaling_request({"resourceGroup": "rg1"}, '{"mongoCluster": "c1"}')
    assert exc_info.value.message == "Missing required parameters: direction."


def test_all_missing_are_named_when_nothing_is_sent() -> None:
    with pytest.raises(InvalidScalingRequest) as exc_info:
        parse_scaling_request({}, b"")
    assert exc_info.value.message == "Missing required parameters: resourceGroup, mongoCluster, direction."


@pytest.mark.parametrize("direction", ["sideways", "UP", "Down", " up"])
def test_direction_is_case_sensitive_and_exact(direction: str) -> None:
    with pytest.raises(InvalidScalingRequest) as exc_info:
        parse_scaling_request({**FULL_QUERY, "direction": direction})
    assert exc_info.value.message == INVALID_DIRECTION_MESSAGE
