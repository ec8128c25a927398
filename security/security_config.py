# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

from enum import StrEnum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field


class FindingPublishingFrequency(StrEnum):
    FIFTEEN_MINUTES = "FIFTEEN_MINUTES"
    ONE_HOUR = "ONE_HOUR"
    SIX_HOURS = "SIX_HOURS"


class MacieConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    enable: bool = False
    policy_findings_publishing_frequency: FindingPublishingFrequency = Field(
        default=FindingPublishingFrequency.FIFTEEN_MINUTES,
        alias="policy-findings-publishing-frequency",
    )
    publish_sensitive_data_findings: bool = Field(default=True, alias="publish-sensitive-data-findings")


class CentralSecurityServicesConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    macie: MacieConfig = Field(default_factory=MacieConfig)


class SecurityConfig(BaseModel):
    """Security services configuration, keyed the same way as the landing zone's security-config.yaml."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    central_security_services: CentralSecurityServicesConfig = Field(
        default_factory=CentralSecurityServicesConfig,
        alias="central-security-services",
    )

    @property
    def macie(self) -> MacieConfig:
        return self.central_security_services.macie


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


def load_security_config(path: str | Path) -> SecurityConfig:
    """
    Loads and validates a security configuration file.
    Raises FileNotFoundError when the file is missing and pydantic.ValidationError when it is invalid.
    """

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Security config file not found: {config_path}")

    return SecurityConfig.model_validate(_load_yaml(config_path))
