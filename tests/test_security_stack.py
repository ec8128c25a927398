# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

import aws_cdk as cdk
import cdk_nag
import pytest
from aws_cdk import assertions
from aws_cdk import aws_iam as iam

import cdk_constants as constants
from security.security_stack import SecurityStack

from conftest import TEST_ACCOUNT, TEST_REGION


def synth_template(security_config, environment) -> assertions.Template:
    app = cdk.App()
    stack = SecurityStack(app, "SecurityStack", stage="test", security_config=security_config, env=environment)
    return assertions.Template.from_stack(stack)


def single_resource(template: assertions.Template, resource_type: str) -> tuple[str, dict]:
    resources = template.find_resources(resource_type)
    assert len(resources) == 1
    return next(iter(resources.items()))


class TestDisabledMacie:
    @pytest.fixture
    def template(self, disabled_security_config, test_environment):
        return synth_template(disabled_security_config, test_environment)

    def test_no_macie_resources_declared(self, template):
        template.resource_count_is(constants.ENABLE_MACIE_SESSION_RESOURCE_TYPE, 0)
        template.resource_count_is(constants.PUT_EXPORT_CONFIGURATION_RESOURCE_TYPE, 0)
        template.resource_count_is("AWS::S3::Bucket", 0)
        template.resource_count_is("AWS::KMS::Key", 0)
        template.resource_count_is("AWS::Lambda::Function", 0)

    def test_stack_keeps_no_constructs(self, disabled_security_config, test_environment):
        stack = SecurityStack(
            cdk.App(), "SecurityStack", stage="test", security_config=disabled_security_config, env=test_environment
        )
        assert stack.macie_session is None
        assert stack.macie_export_config is None
        assert stack.stage == "test"


class TestEnabledMacie:
    @pytest.fixture
    def template(self, enabled_security_config, test_environment):
        return synth_template(enabled_security_config, test_environment)

    def test_one_session_and_one_export_configuration(self, template):
        template.resource_count_is(constants.ENABLE_MACIE_SESSION_RESOURCE_TYPE, 1)
        template.resource_count_is(constants.PUT_EXPORT_CONFIGURATION_RESOURCE_TYPE, 1)

    def test_session_properties(self, template):
        template.has_resource_properties(
            constants.ENABLE_MACIE_SESSION_RESOURCE_TYPE,
            {
                "region": TEST_REGION,
                "findingPublishingFrequency": "FIFTEEN_MINUTES",
                "isSensitiveSh": True,
                "uuid": assertions.Match.any_value(),
            },
        )

    def test_export_configuration_properties(self, template):
        template.has_resource_properties(
            constants.PUT_EXPORT_CONFIGURATION_RESOURCE_TYPE,
            {
                "region": TEST_REGION,
                "bucketName": assertions.Match.any_value(),
                "keyPrefix": constants.MACIE_EXPORT_S3_KEY_PREFIX,
                "kmsKeyArn": assertions.Match.any_value(),
                "uuid": assertions.Match.any_value(),
            },
        )

    def test_export_configuration_depends_on_session(self, template):
        session_logical_id, _ = single_resource(template, constants.ENABLE_MACIE_SESSION_RESOURCE_TYPE)
        _, export_resource = single_resource(template, constants.PUT_EXPORT_CONFIGURATION_RESOURCE_TYPE)

        assert session_logical_id in export_resource["DependsOn"]

    def test_export_configuration_depends_on_bucket_policy(self, template):
        bucket_policy_logical_id, _ = single_resource(template, "AWS::S3::BucketPolicy")
        _, export_resource = single_resource(template, constants.PUT_EXPORT_CONFIGURATION_RESOURCE_TYPE)

        assert bucket_policy_logical_id in export_resource["DependsOn"]

    def test_bucket_named_after_account_and_region(self, template):
        template.has_resource_properties(
            "AWS::S3::Bucket",
            {"BucketName": f"aws-accelerator-security-macie-{TEST_ACCOUNT}-{TEST_REGION}"},
        )

    def test_bucket_encrypted_with_aliased_key(self, template):
        template.has_resource_properties(
            "AWS::KMS::Alias",
            {"AliasName": constants.MACIE_EXPORT_KMS_ALIAS},
        )
        template.has_resource_properties(
            "AWS::KMS::Key",
            {"Description": constants.MACIE_EXPORT_KMS_DESCRIPTION, "EnableKeyRotation": True},
        )
        template.has_resource_properties(
            "AWS::S3::Bucket",
            {
                "BucketEncryption": {
                    "ServerSideEncryptionConfiguration": assertions.Match.array_with(
                        [
                            assertions.Match.object_like(
                                {"ServerSideEncryptionByDefault": assertions.Match.object_like({"SSEAlgorithm": "aws:kms"})}
                            )
                        ]
                    )
                },
                "PublicAccessBlockConfiguration": {
                    "BlockPublicAcls": True,
                    "BlockPublicPolicy": True,
                    "IgnorePublicAcls": True,
                    "RestrictPublicBuckets": True,
                },
            },
        )

    def test_bucket_policy_grants_macie_service_principal(self, template):
        template.has_resource_properties(
            "AWS::S3::BucketPolicy",
            {
                "PolicyDocument": {
                    "Statement": assertions.Match.array_with(
                        [
                            assertions.Match.object_like(
                                {
                                    "Effect": "Allow",
                                    "Principal": {"Service": constants.MACIE_SERVICE_PRINCIPAL},
                                }
                            )
                        ]
                    )
                }
            },
        )

    def test_bucket_policy_grants_handler_role(self, template):
        template.has_resource_properties(
            "AWS::S3::BucketPolicy",
            {
                "PolicyDocument": {
                    "Statement": assertions.Match.array_with(
                        [
                            assertions.Match.object_like(
                                {
                                    "Effect": "Allow",
                                    "Principal": {
                                        "AWS": {
                                            "Fn::GetAtt": [
                                                assertions.Match.string_like_regexp(
                                                    "MaciePutClassificationExportConfigurationRole"
                                                ),
                                                "Arn",
                                            ]
                                        }
                                    },
                                }
                            )
                        ]
                    )
                }
            },
        )

    def test_bucket_tagged_for_macie_access(self, template):
        template.has_resource_properties(
            "AWS::S3::Bucket",
            {
                "Tags": assertions.Match.array_with(
                    [
                        {
                            "Key": constants.MACIE_ACCESS_BUCKET_TAG_KEY,
                            "Value": constants.MACIE_ACCESS_BUCKET_TAG_VALUE,
                        }
                    ]
                )
            },
        )

    def test_bucket_access_logging_suppressed(self, template):
        template.has_resource(
            "AWS::S3::Bucket",
            {
                "Metadata": assertions.Match.object_like(
                    {
                        "cfn_nag": {
                            "rules_to_suppress": [
                                {"id": "W35", "reason": assertions.Match.string_like_regexp("access logging")}
                            ]
                        }
                    }
                )
            },
        )

    def test_session_handler_role_is_scoped_to_macie(self, template):
        template.has_resource_properties(
            "AWS::IAM::Role",
            {
                "Policies": assertions.Match.array_with(
                    [
                        assertions.Match.object_like(
                            {
                                "PolicyDocument": {
                                    "Statement": assertions.Match.array_with(
                                        [
                                            assertions.Match.object_like(
                                                {
                                                    "Sid": "MacieEnableMacieTaskIamAction",
                                                    "Action": "iam:CreateServiceLinkedRole",
                                                    "Condition": {
                                                        "StringLikeIfExists": {
                                                            "iam:AWSServiceName": [constants.MACIE_SERVICE_PRINCIPAL]
                                                        }
                                                    },
                                                }
                                            )
                                        ]
                                    ),
                                    "Version": "2012-10-17",
                                }
                            }
                        )
                    ]
                )
            },
        )

    def test_handlers_run_on_python(self, template):
        template.has_resource_properties(
            "AWS::Lambda::Function",
            {"Handler": "enable_macie_session.lambda_handler", "Runtime": "python3.12"},
        )
        template.has_resource_properties(
            "AWS::Lambda::Function",
            {"Handler": "put_export_configuration.lambda_handler", "Runtime": "python3.12"},
        )


class TestRepeatedSynthesis:
    def test_forced_update_token_changes_every_synthesis(self, enabled_security_config, test_environment):
        first = synth_template(enabled_security_config, test_environment)
        second = synth_template(enabled_security_config, test_environment)

        for resource_type in (
            constants.ENABLE_MACIE_SESSION_RESOURCE_TYPE,
            constants.PUT_EXPORT_CONFIGURATION_RESOURCE_TYPE,
        ):
            _, first_resource = single_resource(first, resource_type)
            _, second_resource = single_resource(second, resource_type)
            assert first_resource["Properties"]["uuid"] != second_resource["Properties"]["uuid"]

    def test_bucket_name_is_stable_across_synthesis(self, enabled_security_config, test_environment):
        first = synth_template(enabled_security_config, test_environment)
        second = synth_template(enabled_security_config, test_environment)

        _, first_bucket = single_resource(first, "AWS::S3::Bucket")
        _, second_bucket = single_resource(second, "AWS::S3::Bucket")
        assert first_bucket["Properties"]["BucketName"] == second_bucket["Properties"]["BucketName"]


class TestCdkNag:
    def test_no_unsuppressed_aws_solutions_errors(self, enabled_security_config, test_environment):
        app = cdk.App()
        cdk.Aspects.of(app).add(cdk_nag.AwsSolutionsChecks())
        stack = SecurityStack(
            app, "SecurityStack", stage="test", security_config=enabled_security_config, env=test_environment
        )

        errors = assertions.Annotations.from_stack(stack).find_error(
            "*", assertions.Match.string_like_regexp("AwsSolutions-.*")
        )
        assert errors == []

    def test_wildcard_policies_outside_macie_constructs_are_reported(self, enabled_security_config, test_environment):
        app = cdk.App()
        cdk.Aspects.of(app).add(cdk_nag.AwsSolutionsChecks())
        stack = SecurityStack(
            app, "SecurityStack", stage="test", security_config=enabled_security_config, env=test_environment
        )
        iam.Role(
            stack,
            "UnrelatedRole",
            assumed_by=iam.ServicePrincipal("lambda.amazonaws.com"),
            inline_policies={
                "Wildcard": iam.PolicyDocument(
                    statements=[iam.PolicyStatement(actions=["s3:GetObject"], resources=["*"])]
                )
            },
        )

        errors = assertions.Annotations.from_stack(stack).find_error(
            "/SecurityStack/UnrelatedRole/Resource", assertions.Match.string_like_regexp("AwsSolutions-IAM5")
        )
        assert errors
