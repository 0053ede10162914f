import os

from typing import (
    List,
    Mapping,
    Optional,
)

STACK_SUFFIX = "-deploy-iam"
DEFAULT_SERVICE_NAME = "unknown-service"


class ConfigurationError(Exception):
    pass


class Config:
    """
    Settings for all deploy-iam stacks.

    Everything is read from the environment exactly once (by the entry
    point), after which the stacks only see this object. Which fields are
    required depends on the stack family; see the require_* methods.
    """

    def __init__(self,
                 *,
                 event_source: Optional[str] = None,
                 service_name: str = DEFAULT_SERVICE_NAME,
                 export_prefix: Optional[str] = None,
                 enable_vpc_permissions: bool = False,
                 parameter_hash: str = "",
                 stack_name: Optional[str] = None,
                 custom_policy_paths: Optional[List[str]] = None) -> None:
        self.event_source = event_source
        self.service_name = service_name
        self.export_prefix = export_prefix if export_prefix else service_name
        self.enable_vpc_permissions = enable_vpc_permissions
        self.parameter_hash = parameter_hash
        self.stack_name = stack_name
        self.custom_policy_paths = list(custom_policy_paths or [])

    @classmethod
    def from_environment(cls, environ: Mapping[str, str] = os.environ) -> "Config":
        custom_policy = environ.get("CUSTOM_POLICY")
        if custom_policy:
            custom_policy_paths = [path.strip() for path in custom_policy.split(",") if path.strip()]
        else:
            custom_policy_paths = []

        return cls(
            event_source=environ.get("EVENT_SOURCE") or None,
            service_name=environ.get("SERVICE_NAME") or DEFAULT_SERVICE_NAME,
            export_prefix=environ.get("EXPORT_PREFIX") or None,
            enable_vpc_permissions=environ.get("ENABLE_VPC_PERMISSIONS") == "1",
            parameter_hash=environ.get("PARAMETER_HASH", ""),
            stack_name=environ.get("STACK_NAME") or None,
            custom_policy_paths=custom_policy_paths,
        )

    @property
    def hyphenated_event_source(self) -> str:
        return self.require_event_source().replace(".", "-")

    @property
    def normalized_export_prefix(self) -> str:
        # Export names are glued directly onto the prefix.
        if self.export_prefix.endswith("-"):
            return self.export_prefix
        return f"{self.export_prefix}-"

    def require_event_source(self) -> str:
        if not self.event_source:
            raise ConfigurationError("No EVENT_SOURCE defined")
        return self.event_source

    def require_stack_name(self) -> str:
        if not self.stack_name:
            raise ConfigurationError("No STACK_NAME defined")
        return self.stack_name


def strip_stack_suffix(stack_name: str) -> str:
    return stack_name.replace(STACK_SUFFIX, "", 1)
