from aws_cdk import (
    CfnOutput,
    Stack,
    Tags,
)
from aws_cdk.aws_iam import (
    Effect,
    Group,
    PolicyStatement,
    User,
)
from constructs import Construct
from typing import (
    Optional,
    Sequence,
)

from deploy_iam.config import strip_stack_suffix
from deploy_iam.construct.version import (
    VERSION,
    VersionParameter,
)


class StackDeployIamStack(Stack):
    """
    Stack to create a user that can deploy a CDK stack.

    CDK deploys go via the roles created by `cdk bootstrap`; so the user
    only has to be able to assume those roles, and to pass the
    CloudFormation execution role. Anything else a specific stack needs can
    be added with custom policy statements.
    """

    def __init__(self,
                 scope: Construct,
                 id: str,
                 *,
                 custom_statements: Optional[Sequence[PolicyStatement]] = None,
                 **kwargs) -> None:
        super().__init__(scope, id, **kwargs)

        Tags.of(self).add("Stack", "StackDeployIam")

        account_id = self.account
        stack_name = strip_stack_suffix(self.stack_name)

        self._user = User(self, "DeployUser",
            user_name=f"{stack_name}-deployer",
        )
        self._group = Group(self, f"{stack_name}-deployers")

        self._group.add_to_policy(PolicyStatement(
            effect=Effect.ALLOW,
            actions=[
                "iam:PassRole",
            ],
            resources=[f"arn:aws:iam::{account_id}:role/cdk-cfn-exec-role-{account_id}-*"],
        ))
        self._group.add_to_policy(PolicyStatement(
            effect=Effect.ALLOW,
            actions=[
                "sts:AssumeRole",
            ],
            resources=[f"arn:aws:iam::{account_id}:role/cdk-*-role-{account_id}-*"],
        ))

        for statement in custom_statements or []:
            self._group.add_to_policy(statement)

        self._user.add_to_group(self._group)

        CfnOutput(self, "DeployUserName",
            description="PublisherUser",
            value=self._user.user_name,
        )
        CfnOutput(self, "Version",
            description="The version of the resources that are currently provisioned in this stack",
            value=VERSION,
        )

        VersionParameter(self, "StackDeployIAMVersion",
            parameter_name=f"/stack-deploy-user/{stack_name}/version",
            description="The version of the stack-deploy-user resources",
        )

    @property
    def user(self) -> User:
        return self._user

    @property
    def group(self) -> Group:
        return self._group
