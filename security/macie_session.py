# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

from typing import Any

import aws_cdk as cdk
from aws_cdk import aws_iam as iam
from constructs import Construct

import cdk_constants as constants
from security.custom_resource import HandlerProvider
from security.custom_resource import forced_update_properties

ENABLE_MACIE_SESSION_PROVIDER_ID = "Custom::MacieEnableMacieSession"
ENABLE_MACIE_SESSION_LAMBDA_FUNCTION_HANDLER = "enable_macie_session.lambda_handler"

MACIE_SESSION_ACTIONS = [
    "macie2:DisableMacie",
    "macie2:EnableMacie",
    "macie2:GetMacieSession",
    "macie2:PutFindingsPublicationConfiguration",
    "macie2:UpdateMacieSession",
]


def create_macie_session_policy_statements() -> list[iam.PolicyStatement]:
    return [
        iam.PolicyStatement(
            sid="MacieEnableMacieTaskMacieActions",
            actions=MACIE_SESSION_ACTIONS,
            effect=iam.Effect.ALLOW,
            resources=["*"],  # Macie session actions do not support resource-level permissions
        ),
        iam.PolicyStatement(
            sid="MacieEnableMacieTaskIamAction",
            actions=["iam:CreateServiceLinkedRole"],
            effect=iam.Effect.ALLOW,
            resources=["*"],
            conditions={
                "StringLikeIfExists": {
                    "iam:AWSServiceName": [constants.MACIE_SERVICE_PRINCIPAL],
                }
            },
        ),
    ]


class MacieSessionEnabler(Construct):
    """Enables the Macie session of a region and configures how its findings are published."""

    def __init__(
        self,
        scope: Construct,
        _id: str,
        region: str,
        finding_publishing_frequency: str,
        is_sensitive_sh: bool,
        **kwargs: Any,
    ) -> None:
        super().__init__(scope, _id, **kwargs)

        self.provider = HandlerProvider.get_or_create(
            self,
            ENABLE_MACIE_SESSION_PROVIDER_ID,
            handler=ENABLE_MACIE_SESSION_LAMBDA_FUNCTION_HANDLER,
            policy_statements=create_macie_session_policy_statements(),
        )

        self.resource = cdk.CustomResource(
            self,
            "Resource",
            resource_type=constants.ENABLE_MACIE_SESSION_RESOURCE_TYPE,
            service_token=self.provider.service_token,
            properties=forced_update_properties(
                {
                    "region": region,
                    "findingPublishingFrequency": str(finding_publishing_frequency),
                    "isSensitiveSh": is_sensitive_sh,
                }
            ),
        )

    @property
    def id(self) -> str:
        return self.resource.ref
