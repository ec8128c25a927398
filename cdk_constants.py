# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

# This file is named cdk_constants.py to avoid conflict with the runtime constants file.

import os

import aws_cdk as cdk

ENVIRONMENT = cdk.Environment(
    account=os.environ.get("CDK_DEFAULT_ACCOUNT"),
    region=os.environ.get("CDK_DEFAULT_REGION"),
)

DEFAULT_STAGE = "dev"
DEFAULT_SECURITY_CONFIG_PATH = os.path.join(os.path.dirname(os.path.realpath(__file__)), "config", "security-config.yaml")

MACIE_SERVICE_PRINCIPAL = "macie.amazonaws.com"

MACIE_EXPORT_BUCKET_NAME_PREFIX = "aws-accelerator-security-macie"
MACIE_EXPORT_KMS_ALIAS = "alias/accelerator/security/macie/s3"
MACIE_EXPORT_KMS_DESCRIPTION = "AWS Accelerator Macie Export Config Bucket CMK"
MACIE_EXPORT_S3_KEY_PREFIX = "aws-macie-export-config"

MACIE_ACCESS_BUCKET_TAG_KEY = "aws-cdk:auto-macie-access-bucket"
MACIE_ACCESS_BUCKET_TAG_VALUE = "true"

ENABLE_MACIE_SESSION_RESOURCE_TYPE = "Custom::EnableMacieSession"
PUT_EXPORT_CONFIGURATION_RESOURCE_TYPE = "Custom::PutClassificationExportConfiguration"

# Published by AWS for each region, see https://docs.powertools.aws.dev/lambda/python/latest/#lambda-layer
# Account 017000801446 only publishes the layer in the commercial partition
POWERTOOLS_LAYER_ARN = (
    f"arn:aws:lambda:{cdk.Aws.REGION}:017000801446:layer:AWSLambdaPowertoolsPythonV3-python312-x86_64:7"
)
