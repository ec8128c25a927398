# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Self

import boto3
from aws_lambda_powertools import Logger
from aws_lambda_powertools.utilities.typing import LambdaContext
from constants import POWERTOOLS_SERVICE_NAME
from constants import EventKeys
from constants import ExportPropertyKeys
from constants import RequestTypes
from properties import get_required_property
from properties import get_resource_properties

if TYPE_CHECKING:
    from mypy_boto3_macie2 import Macie2Client

logger = Logger(service=POWERTOOLS_SERVICE_NAME)


@dataclass(frozen=True)
class ExportConfigurationState:
    region: str
    bucket_name: str
    key_prefix: str
    kms_key_arn: str

    @classmethod
    def from_properties(cls, properties: dict[str, Any]) -> Self:
        return cls(
            region=get_required_property(properties, ExportPropertyKeys.REGION),
            bucket_name=get_required_property(properties, ExportPropertyKeys.BUCKET_NAME),
            key_prefix=get_required_property(properties, ExportPropertyKeys.KEY_PREFIX),
            kms_key_arn=get_required_property(properties, ExportPropertyKeys.KMS_KEY_ARN),
        )

    @property
    def physical_resource_id(self) -> str:
        return f"macie-export-config-{self.region}"

    def to_s3_destination(self) -> dict[str, str]:
        return {
            "bucketName": self.bucket_name,
            "keyPrefix": self.key_prefix,
            "kmsKeyArn": self.kms_key_arn,
        }


def reconcile(state: ExportConfigurationState, macie_client: "Macie2Client") -> dict[str, Any]:
    logger.info(
        "Putting classification export configuration",
        extra={"region": state.region, "bucket_name": state.bucket_name, "key_prefix": state.key_prefix},
    )
    response = macie_client.put_classification_export_configuration(
        configuration={"s3Destination": state.to_s3_destination()},  # type: ignore[typeddict-item]
    )
    return response.get("configuration", {}).get("s3Destination", {})


def create_macie_client(region: str) -> "Macie2Client":
    return boto3.client("macie2", region_name=region)


@logger.inject_lambda_context
def lambda_handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    request_type = event.get(EventKeys.REQUEST_TYPE)
    logger.info("Received request", extra={"request_type": request_type})

    if request_type == RequestTypes.DELETE:
        # Macie has no API to remove the export target; the bucket outlives the configuration
        return {EventKeys.PHYSICAL_RESOURCE_ID: event.get(EventKeys.PHYSICAL_RESOURCE_ID)}

    if request_type not in (RequestTypes.CREATE, RequestTypes.UPDATE):
        raise ValueError(f"Unsupported request type: {request_type}")

    state = ExportConfigurationState.from_properties(get_resource_properties(event))
    s3_destination = reconcile(state, create_macie_client(state.region))

    return {
        EventKeys.PHYSICAL_RESOURCE_ID: state.physical_resource_id,
        EventKeys.DATA: {key: value for key, value in s3_destination.items() if isinstance(value, str)},
    }
