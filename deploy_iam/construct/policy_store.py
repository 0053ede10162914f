from aws_cdk import CfnParameter
from aws_cdk.aws_iam import (
    Effect,
    Group,
    PolicyStatement,
    Role,
)
from constructs import Construct
from typing import (
    Any,
    Dict,
    List,
    Optional,
    Sequence,
    Union,
)

from deploy_iam.enumeration import PrincipalKind
from deploy_iam.qualifier import format_resource_qualifier


class PolicyEntry:
    """
    A single policy statement, before the qualifier parameters are injected.

    Either give a literal list of `resources`, or a `prefix` with
    `qualifiers`; in the latter case the resources are assembled by
    format_resource_qualifier() and can be extended at deploy time via the
    qualifier parameter of this category.
    """

    def __init__(self,
                 name: str,
                 *,
                 actions: Sequence[str],
                 effect: Effect = Effect.ALLOW,
                 conditions: Optional[Dict[str, Any]] = None,
                 prefix: Optional[str] = None,
                 qualifiers: Optional[Sequence[str]] = None,
                 resources: Optional[Sequence[str]] = None) -> None:
        if resources is None and (prefix is None or qualifiers is None):
            raise ValueError(f"Policy '{name}' needs either resources, or a prefix with qualifiers")
        if resources is not None and (prefix is not None or qualifiers is not None):
            raise ValueError(f"Policy '{name}' cannot have both resources and a prefix with qualifiers")

        self.name = name
        self.actions = list(actions)
        self.effect = effect
        self.conditions = conditions
        self.prefix = prefix
        self.qualifiers = None if qualifiers is None else list(qualifiers)
        self.resources = None if resources is None else list(resources)

    @property
    def has_qualifiers(self) -> bool:
        return self.resources is None

    def to_statement(self, extra_qualifier: str) -> PolicyStatement:
        if self.has_qualifiers:
            resources = format_resource_qualifier(self.name, self.prefix, self.qualifiers + [extra_qualifier])
        else:
            resources = self.resources

        return PolicyStatement(
            effect=self.effect,
            actions=self.actions,
            resources=resources,
            conditions=self.conditions,
        )


class PolicyStore:
    """A Group or a Role, together with the policies to attach to it."""

    def __init__(self, principal: Union[Group, Role], policies: Sequence[PolicyEntry]) -> None:
        if isinstance(principal, Role):
            self.kind = PrincipalKind.ROLE
        elif isinstance(principal, Group):
            self.kind = PrincipalKind.GROUP
        else:
            raise TypeError(f"Unsupported principal for a policy store: {principal!r}")

        self.principal = principal
        self.policies = tuple(policies)

    @property
    def role(self) -> Role:
        if self.kind != PrincipalKind.ROLE:
            raise Exception("Policy store is not attached to a Role")
        return self.principal

    @property
    def group(self) -> Group:
        if self.kind != PrincipalKind.GROUP:
            raise Exception("Policy store is not attached to a Group")
        return self.principal

    def add_to_policy(self, statement: PolicyStatement) -> None:
        self.principal.add_to_policy(statement)


class QualifierParameters:
    """
    CloudFormation Parameters to inject custom qualifiers with.

    Every policy category gets exactly one Parameter, no matter how many
    entries share that category. This allows adding a resource to a policy
    at deploy time, without changing any code.
    """

    def __init__(self, scope: Construct, *, default: str = "") -> None:
        self._scope = scope
        self._default = default
        self._parameters = {}  # type: Dict[str, CfnParameter]

    @staticmethod
    def get_parameter_name(name: str) -> str:
        return f"{name.lower()}Qualifier"

    def get(self, name: str) -> CfnParameter:
        parameter_name = self.get_parameter_name(name)

        if parameter_name not in self._parameters:
            self._parameters[parameter_name] = CfnParameter(self._scope, parameter_name,
                type="String",
                description=f"Custom qualifier values provided for {name}",
                default=self._default,
            )

        return self._parameters[parameter_name]

    @property
    def parameter_names(self) -> List[str]:
        return list(self._parameters)


def apply_policy_stores(parameters: QualifierParameters, stores: Sequence[PolicyStore]) -> None:
    for store in stores:
        for policy in store.policies:
            qualifier = parameters.get(policy.name)
            store.add_to_policy(policy.to_statement(qualifier.value_as_string))
