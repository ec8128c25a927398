#!/usr/bin/env python3

# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

import os

import aws_cdk as cdk
import cdk_nag

import cdk_constants as constants
from security.security_config import load_security_config
from security.security_stack import SecurityStack

app = cdk.App()
cdk.Aspects.of(app).add(cdk_nag.AwsSolutionsChecks())

stage = app.node.try_get_context("stage") or os.environ.get("STAGE", constants.DEFAULT_STAGE)
security_config_path = app.node.try_get_context("security-config") or os.environ.get(
    "SECURITY_CONFIG_PATH", constants.DEFAULT_SECURITY_CONFIG_PATH
)

SecurityStack(
    app,
    "SecurityStack",
    stage=stage,
    security_config=load_security_config(security_config_path),
    env=constants.ENVIRONMENT,
)

app.synth()
