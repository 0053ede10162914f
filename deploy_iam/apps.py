from aws_cdk import App
from typing import Optional

from deploy_iam.config import (
    STACK_SUFFIX,
    Config,
)
from deploy_iam.construct.custom_policy import load_custom_policies
from deploy_iam.enumeration import Family
from deploy_iam.stack.eventbridge import EventBridgeIamStack
from deploy_iam.stack.serverless import ServerlessDeployIamStack
from deploy_iam.stack.stack_deploy import StackDeployIamStack


def build_eventbridge_iam(config: Config, app: Optional[App] = None) -> App:
    # Validate before anything is declared.
    name = config.hyphenated_event_source

    app = app or App()
    EventBridgeIamStack(app, f"eventbridge-iam-{name}",
        config=config,
        description="This stack provisions an IAM user with privilege to post events into the default EventBridge",
    )
    return app


def build_serverless_deploy_iam(config: Config, app: Optional[App] = None) -> App:
    app = app or App()
    ServerlessDeployIamStack(app, f"{config.service_name}{STACK_SUFFIX}",
        config=config,
        description="This stack includes IAM resources needed to deploy Serverless apps into this environment",
    )
    return app


def build_stack_deploy_iam(config: Config, app: Optional[App] = None) -> App:
    stack_name = config.require_stack_name()

    custom_statements = []
    if config.custom_policy_paths:
        print("INFO: Custom policy statement(s) have been provided")
        custom_statements = load_custom_policies(config.custom_policy_paths)

    app = app or App()
    StackDeployIamStack(app, f"{stack_name}{STACK_SUFFIX}",
        custom_statements=custom_statements,
        description=f"This stack provisions an IAM user needed to deploy the {stack_name} CDK stack into this environment",
    )
    return app


BUILDERS = {
    Family.EVENTBRIDGE_IAM: build_eventbridge_iam,
    Family.SERVERLESS_DEPLOY_IAM: build_serverless_deploy_iam,
    Family.STACK_DEPLOY_IAM: build_stack_deploy_iam,
}


def build(family: Family, config: Config, app: Optional[App] = None) -> App:
    return BUILDERS[family](config, app)
