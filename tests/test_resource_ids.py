"""Tests for API Center resource id parsing."""

import pytest

from apianalyzer.resource_ids import parse_api_definition_resource_id

from helpers.fakes import RESOURCE_ID


def test_parse_round_trip(api_definition):
    resource = parse_api_definition_resource_id(RESOURCE_ID)

    assert resource == api_definition
    assert resource.resource_id == RESOURCE_ID
    assert str(resource) == RESOURCE_ID


def test_parse_is_case_insensitive_on_segment_names():
    text = RESOURCE_ID.replace("resourceGroups", "resourcegroups").replace(
        "Microsoft.ApiCenter", "microsoft.apicenter"
    )

    resource = parse_api_definition_resource_id(text)

    assert resource.resource_group_name == "contoso-rg"
    assert resource.definition_name == "openapi"


def test_parse_tolerates_missing_leading_and_trailing_slash():
    resource = parse_api_definition_resource_id(RESOURCE_ID.lstrip("/") + "/")

    assert resource.api_name == "petstore"


@pytest.mark.parametrize(
    "text",
    [
        "",
        "/subscriptions/sub/resourceGroups/rg",
        RESOURCE_ID.replace("/definitions/openapi", ""),
        RESOURCE_ID.replace("Microsoft.ApiCenter", "Microsoft.ApiManagement"),
        RESOURCE_ID.replace("/apis/", "/products/"),
        RESOURCE_ID.replace("/versions/v1", "/versions/"),
    ],
)
def test_parse_rejects_other_ids(text):
    with pytest.raises(ValueError):
        parse_api_definition_resource_id(text)
