from aws_cdk import (
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

from deploy_iam.config import Config
from deploy_iam.construct.version import VersionParameter


class EventBridgeIamStack(Stack):
    """
    Stack to create a user that can publish events to the default EventBridge.

    The user is only allowed to publish events with its own event source, so
    a leaked key can't be used to impersonate other services on the bus.
    """

    def __init__(self, scope: Construct, id: str, *, config: Config, **kwargs) -> None:
        super().__init__(scope, id, **kwargs)

        Tags.of(self).add("Stack", "EventBridgeIam")

        event_source = config.require_event_source()
        name = config.hyphenated_event_source

        self._user = User(self, f"eventbridge-user-{name}",
            user_name=f"eventbridge-user-{name}",
        )
        self._group = Group(self, f"eventbridge-users-{name}")

        self._group.add_to_policy(PolicyStatement(
            effect=Effect.ALLOW,
            actions=[
                "events:PutEvents",
            ],
            resources=["*"],
            conditions={
                "StringEquals": {
                    "events:source": event_source,
                },
            },
        ))

        self._user.add_to_group(self._group)

        VersionParameter(self, "EventBridgeIAMVersion",
            parameter_name=f"/eventbridge-user/{name}/version",
            description="The version of the eventbridge-iam resources",
        )

    @property
    def user(self) -> User:
        return self._user

    @property
    def group(self) -> Group:
        return self._group
