from aws_cdk import (
    CfnOutput,
    CfnParameter,
    Stack,
    Tags,
)
from aws_cdk.aws_iam import (
    CompositePrincipal,
    Group,
    Role,
    ServicePrincipal,
    User,
)
from constructs import Construct

from deploy_iam.config import (
    Config,
    strip_stack_suffix,
)
from deploy_iam.construct.policy_store import (
    PolicyStore,
    QualifierParameters,
    apply_policy_stores,
)
from deploy_iam.construct.version import (
    VERSION,
    VersionParameter,
)
from deploy_iam.policy.serverless import (
    deployer_group_policies,
    dummy_policy,
    service_role_policies,
    vpc_policies,
)


class ServerlessDeployIamStack(Stack):
    """
    Stack to create the IAM resources needed to deploy a Serverless app.

    This creates two principals:
    - a Role CloudFormation assumes to create the resources of the service;
    - a Group (with a single User) that is allowed to trigger such deploy,
      but can only do so by passing the above Role.

    All permissions are scoped to resources starting with the name of the
    service. Every policy category gets a CloudFormation Parameter to add
    more qualifiers to it at deploy time.
    """

    def __init__(self, scope: Construct, id: str, *, config: Config, **kwargs) -> None:
        super().__init__(scope, id, **kwargs)

        Tags.of(self).add("Stack", "ServerlessDeployIam")

        service_name = strip_stack_suffix(self.stack_name)
        region = self.region
        account_id = self.account

        shared_vpc_parameter = CfnParameter(self, "sharedVpcId",
            description="Shared VPC ID",
            default="",
        )

        self._role = Role(self, f"ServiceRole-v{VERSION}",
            assumed_by=CompositePrincipal(
                ServicePrincipal("cloudformation.amazonaws.com"),
                ServicePrincipal("lambda.amazonaws.com"),
            ),
        )

        service_role_policy_entries = [dummy_policy(config.parameter_hash)]
        service_role_policy_entries += service_role_policies(service_name, region, account_id)
        if config.enable_vpc_permissions:
            service_role_policy_entries += vpc_policies(region, account_id, shared_vpc_parameter.value_as_string)
        service_role = PolicyStore(self._role, service_role_policy_entries)

        self._group = Group(self, f"{service_name}-deployers")
        deployer_group = PolicyStore(self._group,
            [dummy_policy(config.parameter_hash)]
            + deployer_group_policies(service_name, region, account_id, self._role.role_arn),
        )

        self._qualifiers = QualifierParameters(self, default=config.parameter_hash)
        apply_policy_stores(self._qualifiers, [service_role, deployer_group])

        self._user = User(self, "DeployUser",
            user_name=f"{service_name}-deployer",
            groups=[deployer_group.group],
        )

        export_prefix = config.normalized_export_prefix

        CfnOutput(self, f"{export_prefix}DeployUserName",
            description="PublisherUser",
            value=self._user.user_name,
            export_name=f"{export_prefix}serverless-deployer-username",
        )
        CfnOutput(self, f"{export_prefix}DeployRoleArn",
            description="The ARN of the CloudFormation service role",
            value=service_role.role.role_arn,
            export_name=f"{export_prefix}serverless-deployer-role-arn",
        )
        CfnOutput(self, f"{export_prefix}Version",
            description="The version of the resources that are currently provisioned in this stack",
            value=VERSION,
            export_name=f"{export_prefix}cdk-stack-version",
        )
        CfnOutput(self, f"{export_prefix}ParameterHash",
            description="A hash of the parameter values provided.",
            value=config.parameter_hash or "none",
            export_name=f"{export_prefix}parameter-hash",
        )

        VersionParameter(self, "ServerlessDeployIAMVersion",
            parameter_name=f"/serverless-deploy-iam/{service_name}/version",
            description="The version of the serverless-deploy-iam resources",
        )

    @property
    def role(self) -> Role:
        return self._role

    @property
    def group(self) -> Group:
        return self._group

    @property
    def user(self) -> User:
        return self._user

    @property
    def qualifiers(self) -> QualifierParameters:
        return self._qualifiers
