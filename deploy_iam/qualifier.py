from typing import (
    List,
    Sequence,
)

DEFAULT_DELIMITER = "/"

# ARNs are not consistent between services; some want a "/" between the
# resource-type and the resource-name, others have the separator already in
# the prefix, and EventBridge uses a ":".
QUALIFIER_DELIMITERS = {
    "COGNITO": "",
    "CLOUD_WATCH": "",
    "CLOUD_WATCH_ALARMS": "",
    "LAMBDA": "",
    "S3": "",
    "SNS": "",
    "SQS": "",
    "STEP_FUNCTION": "",
    "API_GATEWAY": "",
    "API_GATEWAY_RESTAPIS": "",
    "EVENT_BRIDGE": ":",
}


def get_delimiter(name: str) -> str:
    return QUALIFIER_DELIMITERS.get(name, DEFAULT_DELIMITER)


def format_resource_qualifier(name: str, prefix: str, qualifiers: Sequence[str]) -> List[str]:
    """
    Prepend the prefix to each qualifier, returning the resulting ARNs.

    Empty qualifiers are skipped. The order of the qualifiers is kept.
    """
    delimiter = get_delimiter(name)
    return [f"{prefix}{delimiter}{qualifier}" for qualifier in qualifiers if qualifier]
