from aws_cdk.aws_ssm import StringParameter
from constructs import Construct

# Version will be used for auditing which role is being used by projects.
# This should only be updated for BREAKING changes.
VERSION = "1"


class VersionParameter(Construct):
    """
    SSM Parameter recording which version of the IAM resources is deployed.

    Nothing reads this at deploy time; it exists so an audit can tell which
    projects still run an older version of the roles and users.
    """

    def __init__(self,
                 scope: Construct,
                 id: str,
                 *,
                 parameter_name: str,
                 description: str,
                 version: str = VERSION) -> None:
        super().__init__(scope, id)

        if not parameter_name.startswith("/"):
            raise Exception("Please use a path for a parameter name")

        StringParameter(self, "Parameter",
            parameter_name=parameter_name,
            description=description,
            string_value=version,
        )
