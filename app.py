#!/usr/bin/env python3

import sys

from deploy_iam.apps import build
from deploy_iam.config import (
    Config,
    ConfigurationError,
)
from deploy_iam.construct.custom_policy import CustomPolicyError
from deploy_iam.enumeration import Family

# Usage: cdk --app "python3 app.py <family>" deploy
#
# Where <family> is one of:
#  - eventbridge-iam        (needs EVENT_SOURCE)
#  - serverless-deploy-iam  (uses SERVICE_NAME, EXPORT_PREFIX, ENABLE_VPC_PERMISSIONS, PARAMETER_HASH)
#  - stack-deploy-iam       (needs STACK_NAME, optionally CUSTOM_POLICY)


def main(argv) -> int:
    families = ", ".join(family.value for family in Family)

    if len(argv) != 2:
        print(f"ERROR: usage: {argv[0]} <{families}>", file=sys.stderr)
        return 1

    try:
        family = Family(argv[1])
    except ValueError:
        print(f"ERROR: unknown stack family '{argv[1]}'; expected one of: {families}", file=sys.stderr)
        return 1

    config = Config.from_environment()

    try:
        app = build(family, config)
    except ConfigurationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except CustomPolicyError as e:
        print(f"ERROR: something went wrong when injecting custom policies: {e}", file=sys.stderr)
        return 1

    app.synth()
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
