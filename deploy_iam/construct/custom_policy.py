import json

from aws_cdk.aws_iam import PolicyStatement
from typing import (
    List,
    Sequence,
)


class CustomPolicyError(Exception):
    pass


def load_custom_policy(path: str) -> List[PolicyStatement]:
    """
    Load a JSON file containing an array of IAM policy statements.

    The statements are taken verbatim; no resource qualifiers are injected.
    """
    try:
        with open(path, encoding="utf-8") as fp:
            document = json.load(fp)
    except OSError as e:
        raise CustomPolicyError(f"cannot read custom policy '{path}': {e}") from e
    except ValueError as e:
        raise CustomPolicyError(f"custom policy '{path}' is not valid JSON: {e}") from e

    if not isinstance(document, list):
        raise CustomPolicyError(f"custom policy statements should be a JSON array: {path}")

    statements = []
    for index, statement in enumerate(document):
        if not isinstance(statement, dict):
            raise CustomPolicyError(f"statement {index} in custom policy '{path}' should be a JSON object")
        statements.append(PolicyStatement.from_json(statement))

    return statements


def load_custom_policies(paths: Sequence[str]) -> List[PolicyStatement]:
    # All files are loaded before anything is attached, so a single broken
    # file never results in a partial policy.
    statements = []
    for path in paths:
        statements.extend(load_custom_policy(path))
        print(f"INFO: Policy loaded from {path}")
    return statements
