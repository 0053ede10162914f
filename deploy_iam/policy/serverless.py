from aws_cdk.aws_iam import Effect
from typing import List

from deploy_iam.construct.policy_store import PolicyEntry


def dummy_policy(parameter_hash: str) -> PolicyEntry:
    # CloudFormation doesn't detect a change when only parameters are
    # modified, as it links parameters by reference instead of injecting the
    # value. By embedding a hash of the parameters in a (harmless) policy, a
    # changed parameter always results in a changed template.
    return PolicyEntry("DUMMY",
        actions=["iam:ListUsers"],
        resources=[f"arn:aws:iam::999999999999:group/{parameter_hash}"],
    )


def service_role_policies(service_name: str, region: str, account_id: str) -> List[PolicyEntry]:
    """Policies for the role CloudFormation (and Lambda) assume to deploy a service."""
    return [
        PolicyEntry("S3",
            prefix="arn:aws:s3:::",
            qualifiers=[f"{service_name}*", f"{service_name}*/*"],
            actions=["s3:*"],
        ),
        PolicyEntry("S3",
            resources=["*"],
            actions=["s3:ListAllMyBuckets"],
        ),
        PolicyEntry("CLOUD_WATCH",
            prefix=f"arn:aws:logs:{region}:{account_id}:log-group:",
            qualifiers=[
                f"/aws/lambda/{service_name}*",
                f"/aws/apigateway/{service_name}*",
                f"/aws/express/{service_name}*",
                f"/aws/stepfunctions/{service_name}*",
                ":log-stream:*",
                f"{service_name}*",
            ],
            actions=["logs:*"],
        ),
        PolicyEntry("CLOUD_WATCH",
            resources=["*"],
            actions=["logs:DeleteDataProtectionPolicy"],
        ),
        PolicyEntry("CLOUD_WATCH_ALARMS",
            prefix=f"arn:aws:cloudwatch:{region}:{account_id}:alarm:",
            qualifiers=["TaskTimedOutAlarm", f"{service_name}*"],
            actions=[
                "cloudwatch:List*",
                "cloudwatch:DescribeAlarms",
                "cloudwatch:DeleteAlarms",
                "cloudwatch:EnableAlarmActions",
                "cloudwatch:Put*",
                "cloudwatch:SetAlarmState",
                "cloudwatch:TagResource",
                "cloudwatch:StartMetricStreams",
                "cloudwatch:StopMetricStreams",
            ],
        ),
        PolicyEntry("LAMBDA",
            prefix=f"arn:aws:lambda:{region}:{account_id}:function:",
            qualifiers=[f"{service_name}*"],
            actions=["lambda:*"],
        ),
        PolicyEntry("LAMBDA_EVENT_SOURCE_MAPPING",
            resources=[f"arn:aws:lambda:{region}:{account_id}:event-source-mapping:*"],
            actions=[
                "lambda:TagResource",
                "lambda:UntagResource",
                "lambda:GetEventSourceMapping",
                "lambda:ListEventSourceMappings",
                "lambda:CreateEventSourceMapping",
                "lambda:DeleteEventSourceMapping",
            ],
        ),
        PolicyEntry("IAM",
            prefix=f"arn:aws:iam::{account_id}:user",
            qualifiers=[f"{service_name}*"],
            actions=["iam:CreateUser", "iam:PutUserPolicy"],
        ),
        PolicyEntry("IAM",
            prefix=f"arn:aws:iam::{account_id}:role",
            qualifiers=[f"{service_name}*", f"Cognito-{service_name}*"],
            actions=[
                "iam:CreateRole",
                "iam:PassRole",
                "iam:GetRole",
                "iam:DeleteRole",
                "iam:UpdateRole",
                "iam:TagRole",
                "iam:GetRolePolicy",
                "iam:DeleteRolePolicy",
                "iam:PutRolePolicy",
                "iam:DetachRolePolicy",
                "iam:AttachRolePolicy",
                "iam:UpdateAssumeRolePolicy",
                "iam:UntagRole",
            ],
        ),
        PolicyEntry("DYNAMO_DB",
            prefix=f"arn:aws:dynamodb:{region}:{account_id}:table",
            qualifiers=[f"{service_name}*"],
            actions=[
                "dynamodb:DescribeTable",
                "dynamodb:CreateTable",
                "dynamodb:UpdateTable",
                "dynamodb:DeleteTable",
                "dynamodb:ListTagsOfResource",
                "dynamodb:TagResource",
                "dynamodb:UntagResource",
                "dynamodb:*TimeToLive",
            ],
        ),
        PolicyEntry("STEP_FUNCTION",
            prefix=f"arn:aws:states:{region}:{account_id}:stateMachine:",
            qualifiers=[f"{service_name}*"],
            actions=[
                "states:CreateStateMachine",
                "states:UpdateStateMachine",
                "states:DeleteStateMachine",
                "states:DescribeStateMachine",
                "states:TagResource",
                "states:UntagResource",
            ],
        ),
        PolicyEntry("EVENT_BRIDGE",
            prefix=f"arn:aws:events:{region}:{account_id}",
            qualifiers=[f"rule/{service_name}*", f"event-bus/{service_name}*"],
            actions=[
                "events:EnableRule",
                "events:PutRule",
                "events:DescribeRule",
                "events:ListRules",
                "events:DisableRule",
                "events:PutTargets",
                "events:RemoveTargets",
                "events:DeleteRule",
                "events:CreateEventBus",
                "events:DescribeEventBus",
                "events:DeleteEventBus",
                "events:TagResource",
                "events:UntagResource",
            ],
        ),
        PolicyEntry("SCHEDULER",
            prefix=f"arn:aws:scheduler:{region}:{account_id}:schedule/default",
            qualifiers=[f"{service_name}*"],
            actions=[
                "scheduler:GetSchedule",
                "scheduler:CreateSchedule",
                "scheduler:UpdateSchedule",
                "scheduler:DeleteSchedule",
            ],
        ),
        PolicyEntry("SCHEDULEGROUP",
            prefix=f"arn:aws:scheduler:{region}:{account_id}:schedule-group",
            qualifiers=[f"{service_name}*"],
            actions=[
                "scheduler:GetScheduleGroup",
                "scheduler:CreateScheduleGroup",
                "scheduler:DeleteScheduleGroup",
                "scheduler:TagResource",
                "scheduler:ListTagsForResource",
            ],
        ),
        PolicyEntry("API_GATEWAY",
            resources=["*"],
            actions=["apigateway:*"],
        ),
        PolicyEntry("SNS",
            prefix=f"arn:aws:sns:{region}:{account_id}:",
            qualifiers=[f"{service_name}*"],
            actions=[
                "sns:GetTopicAttributes",
                "sns:SetTopicAttributes",
                "sns:CreateTopic",
                "sns:DeleteTopic",
                "sns:Subscribe",
                "sns:Unsubscribe",
                "sns:ListSubscriptionsByTopic",
                "sns:TagResource",
            ],
        ),
        PolicyEntry("SQS",
            prefix=f"arn:aws:sqs:{region}:{account_id}:",
            qualifiers=[f"{service_name}*"],
            actions=[
                "sqs:UntagQueue",
                "sqs:RemovePermission",
                "sqs:GetQueueUrl",
                "sqs:GetQueueAttributes",
                "sqs:AddPermission",
                "sqs:DeleteQueue",
                "sqs:ListQueueTags",
                "sqs:SetQueueAttributes",
                "sqs:ChangeMessageVisibility",
                "sqs:TagQueue",
                "sqs:ListDeadLetterSourceQueues",
                "sqs:CreateQueue",
            ],
        ),
        PolicyEntry("COGNITO",
            prefix=f"arn:aws:cognito-sync:{region}:{account_id}:identitypool",
            qualifiers=[f"{service_name}*"],
            actions=[
                "cognito-sync:BulkPublish",
                "cognito-sync:DeleteDataset",
                "cognito-sync:Describe*",
                "cognito-sync:Get*",
                "cognito-sync:List*",
                "cognito-sync:QueryRecords",
                "cognito-sync:RegisterDevice",
                "cognito-sync:SetCognitoEvents",
                "cognito-sync:SetDatasetConfiguration",
                "cognito-sync:SetIdentityPoolConfiguration",
                "cognito-sync:SubscribeToDataset",
                "cognito-sync:UnsubscribeFromDataset",
                "cognito-sync:UpdateRecords",
                "cognito-identity:CreateIdentityPool",
                "cognito-identity:DeleteIdentities",
                "cognito-identity:DeleteIdentityPool",
                "cognito-identity:Describe*",
                "cognito-identity:Get*",
                "cognito-identity:List*",
                "cognito-identity:LookupDeveloperIdentity",
                "cognito-identity:MergeDeveloperIdentities",
                "cognito-identity:SetIdentityPoolRoles",
                "cognito-identity:SetPrincipalTagAttributeMap",
                "cognito-identity:TagResource",
                "cognito-identity:UnlinkDeveloperIdentity",
                "cognito-identity:UnlinkIdentity",
                "cognito-identity:UntagResource",
                "cognito-identity:UpdateIdentityPool",
            ],
        ),
        PolicyEntry("COGNITO_IDP",
            prefix=f"arn:aws:cognito-idp:{region}:{account_id}:userpool",
            qualifiers=[f"{service_name}*", f"{region}_*"],
            actions=["cognito-idp:*"],
        ),
        PolicyEntry("COGNITO_IDP_CREATEUSERPOOL",
            prefix=f"arn:aws:cognito-idp:{region}:{account_id}:userpool",
            qualifiers=["*"],
            actions=["cognito-idp:CreateUserPool"],
        ),
        PolicyEntry("COGNITO_IDP_IDENTITYPOOL",
            prefix=f"arn:aws:cognito-identity:{region}:{account_id}:identitypool",
            qualifiers=[f"{region}:*"],
            actions=[
                "cognito-identity:CreateIdentityPool",
                "cognito-identity:SetIdentityPoolRoles",
            ],
        ),
        PolicyEntry("CLOUDFRONT-OAI",
            resources=[f"arn:aws:cloudfront::{account_id}:origin-access-identity/*"],
            actions=[
                "cloudfront:CreateCloudFrontOriginAccessIdentity",
                "cloudfront:GetCloudFrontOriginAccessIdentity",
                "cloudfront:DeleteCloudFrontOriginAccessIdentity",
            ],
        ),
        PolicyEntry("CLOUDFRONT-FUNCTION",
            resources=[f"arn:aws:cloudfront::{account_id}:function/*"],
            actions=["cloudfront:CreateFunction"],
        ),
        PolicyEntry("CLOUDFRONT-FUNCTION",
            resources=[f"arn:aws:cloudfront::{account_id}:function/{service_name}*"],
            actions=[
                "cloudfront:CreateFunction",
                "cloudfront:DescribeFunction",
                "cloudfront:DeleteFunction",
                "cloudfront:PublishFunction",
                "cloudfront:GetFunction",
            ],
        ),
        PolicyEntry("CLOUDFRONT-DISTRIBUTION",
            resources=[f"arn:aws:cloudfront::{account_id}:distribution/*"],
            actions=[
                "cloudfront:CreateDistribution",
                "cloudfront:DeleteDistribution",
                "cloudfront:GetDistribution",
                "cloudfront:ListDistributions",
                "cloudfront:UpdateDistribution",
                "cloudfront:TagResource",
            ],
        ),
        PolicyEntry("KMS",
            resources=[f"arn:aws:kms:{region}:{account_id}:key/*"],
            actions=[
                "kms:CreateKey",
                "kms:DescribeKey",
                "kms:DisableKey",
                "kms:EnableKey",
                "kms:Encrypt",
                "kms:Generate*",
                "kms:GetKeyPolicy",
                "kms:GetPublicKey",
                "kms:ListKeys",
                "kms:ListResourceTags",
                "kms:PutKeyPolicy",
                "kms:ScheduleKeyDeletion",
                "kms:Sign",
                "kms:TagResource",
                "kms:UntagResource",
            ],
        ),
    ]


def vpc_policies(region: str, account_id: str, shared_vpc_id: str) -> List[PolicyEntry]:
    """Extra policies for services that deploy their Lambdas inside the shared VPC."""
    return [
        PolicyEntry("EC2",
            resources=["*"],
            actions=[
                "ec2:CreateSecurityGroup",
                "ec2:DescribeSecurityGroups",
                "ec2:DescribeSubnets",
                "ec2:DescribeVpcs",
                "ec2:createTags",
            ],
        ),
        # Only security groups inside the shared VPC can be removed.
        PolicyEntry("EC2",
            resources=["*"],
            conditions={
                "StringEquals": {
                    "ec2:Vpc": f"arn:aws:ec2:{region}:{account_id}:vpc/{shared_vpc_id}",
                },
            },
            actions=["ec2:DeleteSecurityGroup"],
        ),
    ]


def deployer_group_policies(service_name: str, region: str, account_id: str, service_role_arn: str) -> List[PolicyEntry]:
    """Policies for the group of users that run the Serverless deploy itself."""
    return [
        PolicyEntry("SERVICE_LINKED_ROLE",
            effect=Effect.ALLOW,
            resources=[
                f"arn:aws:iam::{account_id}:role/aws-service-role/ops.apigateway.amazonaws.com/AWSServiceRoleForAPIGateway",
            ],
            actions=["iam:CreateServiceLinkedRole"],
        ),
        PolicyEntry("CLOUD_FORMATION",
            prefix=f"arn:aws:cloudformation:{region}:{account_id}:stack",
            qualifiers=[f"{service_name}*"],
            actions=[
                "cloudformation:CreateStack",
                "cloudformation:Describe*",
                "cloudformation:List*",
                "cloudformation:Get*",
                "cloudformation:DeleteStack",
                "cloudformation:UpdateStack",
                "cloudformation:ExecuteChangeSet",
                "cloudformation:CreateChangeSet",
                "cloudformation:DeleteChangeSet",
            ],
        ),
        PolicyEntry("CLOUD_FORMATION",
            resources=["*"],
            actions=[
                "cloudformation:ValidateTemplate",
                "cloudformation:ListExports",
            ],
        ),
        PolicyEntry("SSM",
            resources=["*"],
            actions=["ssm:DescribeParameters"],
        ),
        PolicyEntry("SSM",
            prefix=f"arn:aws:ssm:{region}:{account_id}:parameter",
            qualifiers=[f"{service_name}*"],
            actions=["ssm:GetParameter"],
        ),
        PolicyEntry("LAMBDA",
            prefix=f"arn:aws:lambda:{region}:{account_id}:function:",
            qualifiers=[f"{service_name}*"],
            actions=[
                "lambda:GetFunction",
                "lambda:InvokeFunction",
                "lambda:ListTags",
            ],
        ),
        PolicyEntry("IAM",
            resources=[service_role_arn],
            actions=["iam:PassRole"],
        ),
        PolicyEntry("IAM",
            prefix=f"arn:aws:iam::{account_id}:role",
            qualifiers=["aws-service-role/ops.apigateway.amazonaws.com/AWSServiceRoleForAPIGateway"],
            actions=["iam:CreateServiceLinkedRole"],
        ),
        PolicyEntry("S3",
            prefix="arn:aws:s3:::",
            qualifiers=[f"{service_name}*", f"{service_name}*/*"],
            actions=[
                "s3:CreateBucket",
                "s3:ListBucket",
                "s3:DeleteObject",
                "s3:PutObject",
                "s3:GetObject",
                "s3:GetBucketLocation",
            ],
        ),
        PolicyEntry("S3",
            resources=["*"],
            actions=["s3:ListAllMyBuckets"],
        ),
        # The deployer fetches the API keys after a deploy. Generated API key
        # names are random, so this cannot be limited to the service.
        PolicyEntry("API_GATEWAY",
            resources=[f"arn:aws:apigateway:{region}::*"],
            actions=["apigateway:GET", "apigateway:PATCH", "apigateway:POST"],
        ),
        PolicyEntry("DISTRIBUTION",
            resources=[f"arn:aws:cloudfront::{account_id}:distribution/*"],
            actions=["cloudfront:CreateInvalidation"],
        ),
    ]
