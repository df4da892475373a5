"""
Azure resource ids for API Center API definitions.

apianalyzer/src/apianalyzer/resource_ids.py
"""

from dataclasses import dataclass

__all__ = ["ApiDefinitionResource", "parse_api_definition_resource_id"]

PROVIDER_NAMESPACE = "Microsoft.ApiCenter"

# Segment names in the order they appear after the provider namespace
_SEGMENTS = ("services", "workspaces", "apis", "versions", "definitions")


@dataclass(frozen=True)
class ApiDefinitionResource:
    """Identifies one API definition inside an API Center service."""

    subscription_id: str
    resource_group_name: str
    service_name: str
    workspace_name: str
    api_name: str
    version_name: str
    definition_name: str

    @property
    def resource_id(self) -> str:
        """The ARM resource id of the definition."""
        return (
            f"/subscriptions/{self.subscription_id}"
            f"/resourceGroups/{self.resource_group_name}"
            f"/providers/{PROVIDER_NAMESPACE}"
            f"/services/{self.service_name}"
            f"/workspaces/{self.workspace_name}"
            f"/apis/{self.api_name}"
            f"/versions/{self.version_name}"
            f"/definitions/{self.definition_name}"
        )

    def __str__(self) -> str:
        return self.resource_id


def parse_api_definition_resource_id(resource_id: str) -> ApiDefinitionResource:
    """Parse an ARM resource id into an ApiDefinitionResource.

    Segment names are matched case-insensitively. A missing leading slash and
    a trailing slash are tolerated.

    Raises:
        ValueError: if the id does not name an API Center API definition.
    """
    parts = resource_id.strip().strip("/").split("/")
    if len(parts) != 16 or any(not part for part in parts):
        raise ValueError(f"Not an API definition resource id: {resource_id!r}")

    # Alternating name/value pairs
    expected_keys = ("subscriptions", "resourcegroups", "providers") + _SEGMENTS
    keys = parts[0::2]
    values = parts[1::2]

    for key, expected in zip(keys, expected_keys):
        if key.lower() != expected:
            raise ValueError(
                f"Not an API definition resource id: {resource_id!r} "
                f"(expected '{expected}' segment, found '{key}')"
            )

    if values[2].lower() != PROVIDER_NAMESPACE.lower():
        raise ValueError(
            f"Not an API Center resource id: {resource_id!r} (provider '{values[2]}')"
        )

    return ApiDefinitionResource(
        subscription_id=values[0],
        resource_group_name=values[1],
        service_name=values[3],
        workspace_name=values[4],
        api_name=values[5],
        version_name=values[6],
        definition_name=values[7],
    )
