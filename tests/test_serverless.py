import pytest

from aws_cdk import App
from aws_cdk.assertions import (
    Match,
    Template,
)

from deploy_iam.config import Config
from deploy_iam.policy.serverless import (
    deployer_group_policies,
    service_role_policies,
)
from deploy_iam.stack.serverless import ServerlessDeployIamStack


def _template(**kwargs) -> Template:
    config = Config(service_name="jest", **kwargs)
    stack = ServerlessDeployIamStack(App(), "jest-deploy-iam", config=config)
    return Template.from_stack(stack)


def _statements(template: Template, logical_id_prefix: str):
    # Large role policies are split by CDK into overflow managed policies.
    statements = []
    for type_ in ("AWS::IAM::Policy", "AWS::IAM::ManagedPolicy"):
        for logical_id, resource in template.find_resources(type_).items():
            if logical_id.startswith(logical_id_prefix):
                statements.extend(resource["Properties"]["PolicyDocument"]["Statement"])
    return statements


def _actions(statement):
    actions = statement["Action"]
    return [actions] if isinstance(actions, str) else actions


@pytest.fixture
def template():
    return _template(parameter_hash="abc123")


def test_creates_deploy_role(template):
    template.resource_count_is("AWS::IAM::Role", 1)

    role = next(iter(template.find_resources("AWS::IAM::Role").values()))
    services = set()
    for statement in role["Properties"]["AssumeRolePolicyDocument"]["Statement"]:
        assert statement["Action"] == "sts:AssumeRole"
        service = statement["Principal"]["Service"]
        services.update([service] if isinstance(service, str) else service)

    assert services == {"cloudformation.amazonaws.com", "lambda.amazonaws.com"}


def test_creates_deploy_user_in_group(template):
    template.resource_count_is("AWS::IAM::User", 1)
    template.resource_count_is("AWS::IAM::Group", 1)
    template.has_resource_properties("AWS::IAM::User", {
        "UserName": "jest-deployer",
        "Groups": [{"Ref": Match.string_like_regexp("jestdeployers.*")}],
    })


def test_service_role_s3_permissions(template):
    statements = _statements(template, "ServiceRolev1")

    assert {
        "Action": "s3:*",
        "Effect": "Allow",
        "Resource": [
            "arn:aws:s3:::jest*",
            "arn:aws:s3:::jest*/*",
            {"Fn::Join": ["", ["arn:aws:s3:::", {"Ref": "s3Qualifier"}]]},
        ],
    } in statements
    assert {
        "Action": "s3:ListAllMyBuckets",
        "Effect": "Allow",
        "Resource": "*",
    } in statements


def test_service_role_eventbridge_uses_colon_delimiter(template):
    statements = _statements(template, "ServiceRolev1")
    statement = next(s for s in statements if "events:PutRule" in _actions(s))

    parts = [resource["Fn::Join"][1] for resource in statement["Resource"]]
    assert parts[0][-1] == ":rule/jest*"
    assert parts[1][-1] == ":event-bus/jest*"
    assert parts[2][-1] == {"Ref": "eventbridgeQualifier"}


def test_deployer_group_cloudformation_permissions(template):
    statements = _statements(template, "jestdeployers")

    assert {
        "Action": [
            "cloudformation:ValidateTemplate",
            "cloudformation:ListExports",
        ],
        "Effect": "Allow",
        "Resource": "*",
    } in statements

    statement = next(s for s in statements if "cloudformation:CreateStack" in _actions(s))
    assert statement["Resource"][0]["Fn::Join"][1][-1] == ":stack/jest*"
    assert statement["Resource"][1]["Fn::Join"][1][-1] == {"Ref": "cloudformationQualifier"}


def test_deployer_group_can_pass_service_role(template):
    template.has_resource_properties("AWS::IAM::Policy", {
        "PolicyName": Match.string_like_regexp("jestdeployersDefaultPolicy.*"),
        "PolicyDocument": {
            "Statement": Match.array_with([
                Match.object_like({
                    "Action": "iam:PassRole",
                    "Effect": "Allow",
                    "Resource": {"Fn::GetAtt": [Match.string_like_regexp("ServiceRolev1.*"), "Arn"]},
                }),
            ]),
        },
    })


def test_dummy_policy_contains_parameter_hash(template):
    dummy = {
        "Action": "iam:ListUsers",
        "Effect": "Allow",
        "Resource": "arn:aws:iam::999999999999:group/abc123",
    }

    assert dummy in _statements(template, "ServiceRolev1")
    assert dummy in _statements(template, "jestdeployers")


def test_one_qualifier_parameter_per_category(template):
    names = {"DUMMY"}
    names.update(entry.name for entry in service_role_policies("jest", "region", "account"))
    names.update(entry.name for entry in deployer_group_policies("jest", "region", "account", "role"))

    parameters = template.find_parameters("*", {"Type": "String", "Default": "abc123"})

    assert len(parameters) == len(names)
    template.has_parameter("s3Qualifier", {
        "Type": "String",
        "Default": "abc123",
        "Description": "Custom qualifier values provided for S3",
    })
    template.has_parameter("sharedVpcId", {"Default": ""})


def test_no_ec2_permissions_without_vpc(template):
    for statement in _statements(template, ""):
        assert not any(action.startswith("ec2:") for action in _actions(statement))


def test_ec2_permissions_with_vpc():
    template = _template(enable_vpc_permissions=True)

    statements = _statements(template, "ServiceRolev1")
    ec2_statements = [s for s in statements if any(action.startswith("ec2:") for action in _actions(s))]

    assert len(ec2_statements) == 2
    unconditional, conditional = sorted(ec2_statements, key=lambda s: "Condition" in s)
    assert unconditional["Action"] == [
        "ec2:CreateSecurityGroup",
        "ec2:DescribeSecurityGroups",
        "ec2:DescribeSubnets",
        "ec2:DescribeVpcs",
        "ec2:createTags",
    ]
    assert conditional["Action"] == "ec2:DeleteSecurityGroup"
    assert "ec2:Vpc" in conditional["Condition"]["StringEquals"]

    for statement in _statements(template, "jestdeployers"):
        assert not any(action.startswith("ec2:") for action in _actions(statement))


def test_outputs(template):
    template.has_output("*", {
        "Export": {"Name": "jest-serverless-deployer-username"},
        "Value": {"Ref": Match.string_like_regexp("DeployUser.*")},
    })
    template.has_output("*", {
        "Export": {"Name": "jest-serverless-deployer-role-arn"},
    })
    template.has_output("*", {
        "Export": {"Name": "jest-cdk-stack-version"},
        "Value": "1",
    })
    template.has_output("*", {
        "Export": {"Name": "jest-parameter-hash"},
        "Value": "abc123",
    })


def test_outputs_with_export_prefix():
    template = _template(export_prefix="shared")

    template.has_output("*", {
        "Export": {"Name": "shared-cdk-stack-version"},
    })


def test_version_parameter(template):
    template.has_resource_properties("AWS::SSM::Parameter", {
        "Name": "/serverless-deploy-iam/jest/version",
        "Type": "String",
        "Value": "1",
    })


def test_stack_exposes_principals_and_qualifiers():
    stack = ServerlessDeployIamStack(App(), "jest-deploy-iam", config=Config(service_name="jest"))

    assert "s3Qualifier" in stack.qualifiers.parameter_names
    assert "eventbridgeQualifier" in stack.qualifiers.parameter_names
    assert stack.user.node.id == "DeployUser"
    assert stack.group.node.id == "jest-deployers"
    assert stack.role.node.id == "ServiceRole-v1"


def test_stack_suffix_only_stripped_once():
    stack = ServerlessDeployIamStack(App(), "svc-deploy-iam-deploy-iam", config=Config(service_name="svc-deploy-iam"))

    template = Template.from_stack(stack)
    template.has_resource_properties("AWS::IAM::User", {"UserName": "svc-deploy-iam-deployer"})
    template.has_resource_properties("AWS::SSM::Parameter", {"Name": "/serverless-deploy-iam/svc-deploy-iam/version"})
