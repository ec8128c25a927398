# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Self

import boto3
from aws_lambda_powertools import Logger
from aws_lambda_powertools.utilities.typing import LambdaContext
from botocore.exceptions import ClientError
from constants import MACIE_NOT_ENABLED_ERROR_CODE
from constants import MACIE_NOT_ENABLED_ERROR_MESSAGE
from constants import MACIE_STATUS_ENABLED
from constants import POWERTOOLS_SERVICE_NAME
from constants import EventKeys
from constants import RequestTypes
from constants import SessionPropertyKeys
from properties import get_required_property
from properties import get_resource_properties
from properties import parse_bool

if TYPE_CHECKING:
    from mypy_boto3_macie2 import Macie2Client

logger = Logger(service=POWERTOOLS_SERVICE_NAME)


@dataclass(frozen=True)
class MacieSessionState:
    region: str
    finding_publishing_frequency: str
    is_sensitive_sh: bool

    @classmethod
    def from_properties(cls, properties: dict[str, Any]) -> Self:
        return cls(
            region=get_required_property(properties, SessionPropertyKeys.REGION),
            finding_publishing_frequency=get_required_property(
                properties, SessionPropertyKeys.FINDING_PUBLISHING_FREQUENCY
            ),
            is_sensitive_sh=parse_bool(get_required_property(properties, SessionPropertyKeys.IS_SENSITIVE_SH)),
        )

    @property
    def physical_resource_id(self) -> str:
        return f"macie-session-{self.region}"


def get_macie_session_status(macie_client: "Macie2Client") -> str | None:
    """Returns the session status (ENABLED or PAUSED), or None when Macie has never been enabled."""

    try:
        response = macie_client.get_macie_session()
    except ClientError as error:
        # GetMacieSession is denied until Macie has been enabled in the account
        if is_macie_not_enabled_error(error):
            return None
        raise

    return response.get("status")


def is_macie_not_enabled_error(error: ClientError) -> bool:
    details = error.response.get("Error", {})
    if details.get("Code") != MACIE_NOT_ENABLED_ERROR_CODE:
        return False
    if MACIE_NOT_ENABLED_ERROR_MESSAGE not in details.get("Message", "").lower():
        logger.error(
            "GetMacieSession denied for a reason other than Macie not being enabled", extra={"error": details}
        )
        return False
    return True


def reconcile(state: MacieSessionState, macie_client: "Macie2Client") -> None:
    status = get_macie_session_status(macie_client)
    if status is None:
        logger.info("Enabling Macie session", extra={"region": state.region})
        macie_client.enable_macie(
            findingPublishingFrequency=state.finding_publishing_frequency,  # type: ignore[arg-type]
            status=MACIE_STATUS_ENABLED,
        )
    else:
        # A PAUSED session already exists, so it is resumed rather than enabled again
        logger.info("Macie session exists, updating", extra={"region": state.region, "status": status})
        macie_client.update_macie_session(
            findingPublishingFrequency=state.finding_publishing_frequency,  # type: ignore[arg-type]
            status=MACIE_STATUS_ENABLED,
        )

    macie_client.put_findings_publication_configuration(
        securityHubConfiguration={
            "publishClassificationFindings": state.is_sensitive_sh,
            "publishPolicyFindings": True,
        },
    )


def remove(state: MacieSessionState, macie_client: "Macie2Client") -> None:
    status = get_macie_session_status(macie_client)
    if status is None:
        logger.info("Macie session not enabled, nothing to disable", extra={"region": state.region})
        return

    logger.info("Disabling Macie session", extra={"region": state.region, "status": status})
    macie_client.disable_macie()


def create_macie_client(region: str) -> "Macie2Client":
    return boto3.client("macie2", region_name=region)


@logger.inject_lambda_context
def lambda_handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    request_type = event.get(EventKeys.REQUEST_TYPE)
    state = MacieSessionState.from_properties(get_resource_properties(event))
    logger.info("Received request", extra={"request_type": request_type})

    macie_client = create_macie_client(state.region)

    if request_type in (RequestTypes.CREATE, RequestTypes.UPDATE):
        reconcile(state, macie_client)
    elif request_type == RequestTypes.DELETE:
        remove(state, macie_client)
    else:
        raise ValueError(f"Unsupported request type: {request_type}")

    return {EventKeys.PHYSICAL_RESOURCE_ID: state.physical_resource_id}
