# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0


# pylint: disable=too-few-public-methods
class RequestTypes:
    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"


# pylint: disable=too-few-public-methods
class EventKeys:
    REQUEST_TYPE = "RequestType"
    RESOURCE_PROPERTIES = "ResourceProperties"
    PHYSICAL_RESOURCE_ID = "PhysicalResourceId"
    DATA = "Data"


# pylint: disable=too-few-public-methods
class SessionPropertyKeys:
    REGION = "region"
    FINDING_PUBLISHING_FREQUENCY = "findingPublishingFrequency"
    IS_SENSITIVE_SH = "isSensitiveSh"
    UUID = "uuid"


# pylint: disable=too-few-public-methods
class ExportPropertyKeys:
    REGION = "region"
    BUCKET_NAME = "bucketName"
    KEY_PREFIX = "keyPrefix"
    KMS_KEY_ARN = "kmsKeyArn"
    UUID = "uuid"


MACIE_STATUS_ENABLED = "ENABLED"
MACIE_NOT_ENABLED_ERROR_CODE = "AccessDeniedException"
MACIE_NOT_ENABLED_ERROR_MESSAGE = "macie is not enabled"

POWERTOOLS_SERVICE_NAME = "macie"
