# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

from typing import Any

import aws_cdk as cdk
import cdk_nag
from constructs import Construct

import cdk_constants as constants
from security.macie_export_config import MacieExportConfigurationSetter
from security.macie_session import MacieSessionEnabler
from security.security_config import SecurityConfig


class SecurityStack(cdk.Stack):
    """
    Organizational security stack.
    Enables Macie for the stack's region when the security config asks for it, and exports
    classification results to a bucket owned by this stack.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        stage: str,
        security_config: SecurityConfig,
        **kwargs: Any,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.stage = stage
        self.macie_session: MacieSessionEnabler | None = None
        self.macie_export_config: MacieExportConfigurationSetter | None = None

        macie_config = security_config.macie
        if not macie_config.enable:
            return

        self.macie_session = MacieSessionEnabler(
            self,
            "AwsMacieSession",
            region=self.region,
            finding_publishing_frequency=macie_config.policy_findings_publishing_frequency,
            is_sensitive_sh=macie_config.publish_sensitive_data_findings,
        )

        self.macie_export_config = MacieExportConfigurationSetter(
            self,
            "AwsMacieUpdateExportConfigClassification",
            region=self.region,
            account=self.account,
            s3_key_prefix=constants.MACIE_EXPORT_S3_KEY_PREFIX,
        )
        self.macie_export_config.node.add_dependency(self.macie_session)

        self._add_cdk_nag_suppressions(self.macie_session, self.macie_export_config)

    def _add_cdk_nag_suppressions(
        self, macie_session: MacieSessionEnabler, macie_export_config: MacieExportConfigurationSetter
    ) -> None:
        aws_managed_policies_suppression = cdk_nag.NagPackSuppression(
            id="AwsSolutions-IAM4",
            reason="Allow AWS managed policies for custom resource handler logging",
        )
        cdk_nag.NagSuppressions.add_stack_suppressions(
            stack=self, suppressions=[aws_managed_policies_suppression]
        )

        aws_wildcard_policy_suppression = cdk_nag.NagPackSuppression(
            id="AwsSolutions-IAM5",
            reason="Macie actions do not support resource-level permissions and bucket grants cover all objects",
        )
        # Handler providers live at stack scope, outside the constructs that use them
        for construct in (
            macie_session,
            macie_session.provider,
            macie_export_config,
            macie_export_config.provider,
        ):
            cdk_nag.NagSuppressions.add_resource_suppressions(
                construct,
                suppressions=[aws_wildcard_policy_suppression],
                apply_to_children=True,
            )

        provider_framework_runtime_suppression = cdk_nag.NagPackSuppression(
            id="AwsSolutions-L1",
            reason="Custom resource provider framework runtime is managed by the CDK",
        )
        cdk_nag.NagSuppressions.add_stack_suppressions(
            stack=self, suppressions=[provider_framework_runtime_suppression]
        )
