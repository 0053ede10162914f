from enum import Enum


class PrincipalKind(Enum):
    GROUP = "Group"
    ROLE = "Role"


class Family(Enum):
    EVENTBRIDGE_IAM = "eventbridge-iam"
    SERVERLESS_DEPLOY_IAM = "serverless-deploy-iam"
    STACK_DEPLOY_IAM = "stack-deploy-iam"
