# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

from typing import Any, cast

import aws_cdk as cdk
from aws_cdk import aws_kms as kms
from aws_cdk import aws_s3 as s3
from constructs import Construct


class SecureBucket(Construct):
    """S3 bucket encrypted with its own customer managed KMS key, private and SSL-only."""

    def __init__(
        self,
        scope: Construct,
        _id: str,
        bucket_name: str,
        kms_alias_name: str,
        kms_description: str,
        **kwargs: Any,
    ) -> None:
        super().__init__(scope, _id, **kwargs)

        self.encryption_key = kms.Key(
            self,
            "Cmk",
            alias=kms_alias_name,
            description=kms_description,
            enable_key_rotation=True,
            removal_policy=cdk.RemovalPolicy.RETAIN,
        )

        self.bucket = s3.Bucket(
            self,
            "Resource",
            bucket_name=bucket_name,
            encryption=s3.BucketEncryption.KMS,
            encryption_key=self.encryption_key,
            bucket_key_enabled=True,
            block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
            enforce_ssl=True,
            versioned=True,
            removal_policy=cdk.RemovalPolicy.RETAIN,
        )

    @property
    def cfn_bucket(self) -> s3.CfnBucket:
        cfn_bucket = self.bucket.node.default_child
        if cfn_bucket is None:
            raise ValueError("Bucket has no CfnBucket default child")
        return cast(s3.CfnBucket, cfn_bucket)
