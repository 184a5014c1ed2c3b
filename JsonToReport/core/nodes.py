# Contains helpers for classifying JSON values
from enum import Enum


class NodeKind(Enum):
    """The three shapes a parsed JSON value can take."""
    OBJECT = "object"
    ARRAY = "array"
    SCALAR = "scalar"


def kind_of(node):
    """
    Classify a value produced by json.loads.

    Args:
        node: dict, list or scalar (str, int, float, bool, None)

    Returns:
        NodeKind: the shape of the value
    """
    if isinstance(node, dict):
        return NodeKind.OBJECT
    if isinstance(node, list):
        return NodeKind.ARRAY
    return NodeKind.SCALAR


def is_container(node):
    """True for objects and arrays, the values that become child tables."""
    return kind_of(node) is not NodeKind.SCALAR
