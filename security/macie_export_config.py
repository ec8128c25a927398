# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

from typing import Any

import aws_cdk as cdk
import cdk_nag
from aws_cdk import aws_iam as iam
from aws_cdk import aws_s3 as s3
from constructs import Construct

import cdk_constants as constants
from security.custom_resource import HandlerProvider
from security.custom_resource import forced_update_properties
from security.secure_bucket import SecureBucket

PUT_EXPORT_CONFIGURATION_PROVIDER_ID = "Custom::MaciePutClassificationExportConfiguration"
PUT_EXPORT_CONFIGURATION_LAMBDA_FUNCTION_HANDLER = "put_export_configuration.lambda_handler"

ACCESS_LOGGING_SUPPRESSION_REASON = (
    "S3 Bucket access logging is not enabled for the accelerator security macie export config bucket."
)


def macie_export_bucket_name(account: str, region: str) -> str:
    return f"{constants.MACIE_EXPORT_BUCKET_NAME_PREFIX}-{account}-{region}"


def create_export_configuration_policy_statements() -> list[iam.PolicyStatement]:
    return [
        iam.PolicyStatement(
            sid="MaciePutClassificationExportConfigurationTaskMacieActions",
            actions=[
                "macie2:PutClassificationExportConfiguration",
                "macie2:GetClassificationExportConfiguration",
            ],
            effect=iam.Effect.ALLOW,
            resources=["*"],
        ),
    ]


class MacieExportConfigurationSetter(Construct):
    """Points Macie's classification export at a dedicated KMS encrypted bucket."""

    def __init__(
        self,
        scope: Construct,
        _id: str,
        region: str,
        account: str,
        s3_key_prefix: str,
        **kwargs: Any,
    ) -> None:
        super().__init__(scope, _id, **kwargs)

        self.secure_bucket = SecureBucket(
            self,
            "AwsMacieExportConfigBucket",
            bucket_name=macie_export_bucket_name(account, region),
            kms_alias_name=constants.MACIE_EXPORT_KMS_ALIAS,
            kms_description=constants.MACIE_EXPORT_KMS_DESCRIPTION,
        )
        self._suppress_access_logging_findings()

        self.provider = HandlerProvider.get_or_create(
            self,
            PUT_EXPORT_CONFIGURATION_PROVIDER_ID,
            handler=PUT_EXPORT_CONFIGURATION_LAMBDA_FUNCTION_HANDLER,
            policy_statements=create_export_configuration_policy_statements(),
        )

        # Both grants land in the bucket policy so the handler and Macie can write exports
        handler_bucket_grant = self.bucket.grant_read_write(iam.ArnPrincipal(self.provider.role_arn))
        macie_bucket_grant = self.bucket.grant_read_write(iam.ServicePrincipal(constants.MACIE_SERVICE_PRINCIPAL))

        self.resource = cdk.CustomResource(
            self,
            "Resource",
            resource_type=constants.PUT_EXPORT_CONFIGURATION_RESOURCE_TYPE,
            service_token=self.provider.service_token,
            properties=forced_update_properties(
                {
                    "region": region,
                    "bucketName": self.bucket.bucket_name,
                    "keyPrefix": s3_key_prefix,
                    "kmsKeyArn": self.secure_bucket.encryption_key.key_arn,
                }
            ),
        )

        # Bucket policy must be created before and deleted after the custom resource
        self.resource.node.add_dependency(handler_bucket_grant)
        self.resource.node.add_dependency(macie_bucket_grant)

        cdk.Tags.of(self.bucket).add(constants.MACIE_ACCESS_BUCKET_TAG_KEY, constants.MACIE_ACCESS_BUCKET_TAG_VALUE)

    @property
    def bucket(self) -> s3.Bucket:
        return self.secure_bucket.bucket

    @property
    def id(self) -> str:
        return self.resource.ref

    def _suppress_access_logging_findings(self) -> None:
        cdk_nag.NagSuppressions.add_resource_suppressions(
            self.secure_bucket.bucket,
            suppressions=[
                cdk_nag.NagPackSuppression(
                    id="AwsSolutions-S1",
                    reason=ACCESS_LOGGING_SUPPRESSION_REASON,
                )
            ],
        )
        self.secure_bucket.cfn_bucket.add_metadata(
            "cfn_nag",
            {
                "rules_to_suppress": [
                    {
                        "id": "W35",
                        "reason": ACCESS_LOGGING_SUPPRESSION_REASON,
                    }
                ]
            },
        )
