# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

import os
import sys
from dataclasses import dataclass

import aws_cdk as cdk
import pytest

from security.security_config import SecurityConfig

# Handlers are deployed with `security/runtime` as the Lambda code root and import each other by bare name
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "security", "runtime"))

TEST_ACCOUNT = "111111111111"
TEST_REGION = "us-east-1"


@dataclass
class FakeLambdaContext:
    function_name: str = "macie-handler"
    memory_limit_in_mb: int = 128
    invoked_function_arn: str = f"arn:aws:lambda:{TEST_REGION}:{TEST_ACCOUNT}:function:macie-handler"
    aws_request_id: str = "52fdfc07-2182-154f-163f-5f0f9a621d72"
    log_group_name: str = "/aws/lambda/macie-handler"
    log_stream_name: str = "2026/10/19/[$LATEST]0123456789abcdef"
    tenant_id: str | None = None


@pytest.fixture
def lambda_context():
    return FakeLambdaContext()


@pytest.fixture
def test_environment():
    return cdk.Environment(account=TEST_ACCOUNT, region=TEST_REGION)


@pytest.fixture
def enabled_security_config():
    return SecurityConfig.model_validate(
        {
            "central-security-services": {
                "macie": {
                    "enable": True,
                    "policy-findings-publishing-frequency": "FIFTEEN_MINUTES",
                    "publish-sensitive-data-findings": True,
                }
            }
        }
    )


@pytest.fixture
def disabled_security_config():
    return SecurityConfig.model_validate({"central-security-services": {"macie": {"enable": False}}})
