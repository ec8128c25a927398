# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

from typing import Any

from constants import EventKeys

TRUE_VALUES = ("true", "1", "yes")


def get_resource_properties(event: dict[str, Any]) -> dict[str, Any]:
    return event.get(EventKeys.RESOURCE_PROPERTIES) or {}


def get_required_property(properties: dict[str, Any], key: str) -> str:
    value = properties.get(key)
    if value is None or value == "":
        raise ValueError(f"{key} is required")
    return str(value)


def parse_bool(value: Any) -> bool:
    # CloudFormation passes custom resource property values as strings
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUE_VALUES
