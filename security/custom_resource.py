# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

import os
import uuid
from typing import Any, Self

import aws_cdk as cdk
from aws_cdk import aws_iam as iam
from aws_cdk import aws_lambda as _lambda
from aws_cdk import custom_resources
from constructs import Construct

import cdk_constants as constants

RUNTIME_PATH = os.path.join(os.path.dirname(os.path.realpath(__file__)), "runtime")

LAMBDA_BASIC_EXECUTION_POLICY_NAME = "service-role/AWSLambdaBasicExecutionRole"
FORCED_UPDATE_PROPERTY_KEY = "uuid"


def forced_update_properties(properties: dict[str, Any]) -> dict[str, Any]:
    """
    Returns a copy of `properties` with a new random `uuid` entry.
    The value differs on every synthesis, so CloudFormation sends an Update to the handler
    on every deployment even when the other properties are unchanged.
    """

    return {**properties, FORCED_UPDATE_PROPERTY_KEY: str(uuid.uuid4())}


class HandlerProvider(Construct):
    """
    Custom resource provider backed by one of the handlers in `runtime`.
    Use `get_or_create` so that each handler is deployed once per stack.
    """

    def __init__(
        self,
        scope: Construct,
        _id: str,
        handler: str,
        policy_statements: list[iam.PolicyStatement],
        **kwargs: Any,
    ) -> None:
        super().__init__(scope, _id, **kwargs)

        self.role = iam.Role(
            self,
            "Role",
            assumed_by=iam.ServicePrincipal("lambda.amazonaws.com"),
            managed_policies=[iam.ManagedPolicy.from_aws_managed_policy_name(LAMBDA_BASIC_EXECUTION_POLICY_NAME)],
            inline_policies={"Default": iam.PolicyDocument(statements=policy_statements)},
        )

        powertools_layer = _lambda.LayerVersion.from_layer_version_arn(
            self, "PowertoolsLayer", constants.POWERTOOLS_LAYER_ARN
        )

        self.function = _lambda.Function(
            self,
            "Function",
            runtime=_lambda.Runtime.PYTHON_3_12,
            code=_lambda.Code.from_asset(RUNTIME_PATH),  # an asset belongs to a single stack
            handler=handler,
            role=self.role,
            timeout=cdk.Duration.minutes(5),
            layers=[powertools_layer],
        )

        self.provider = custom_resources.Provider(
            self,
            "Provider",
            on_event_handler=self.function,
        )

    @property
    def role_arn(self) -> str:
        return self.role.role_arn

    @property
    def service_token(self) -> str:
        return self.provider.service_token

    @classmethod
    def get_or_create(
        cls,
        scope: Construct,
        uniqueid: str,
        handler: str,
        policy_statements: list[iam.PolicyStatement],
    ) -> Self:
        stack = cdk.Stack.of(scope)
        existing = stack.node.try_find_child(uniqueid)
        if existing is not None:
            if not isinstance(existing, cls):
                raise ValueError(f"Construct {uniqueid} already exists and is not a {cls.__name__}")
            return existing

        return cls(stack, uniqueid, handler=handler, policy_statements=policy_statements)
