# Contains class for navigating dotted paths over parsed JSON
import re

from .nodes import NodeKind, kind_of


class _NotFound:
    """Sentinel returned when a path does not lead anywhere."""

    def __bool__(self):
        return False

    def __repr__(self):
        return "NOT_FOUND"


NOT_FOUND = _NotFound()

# "name", "name[3]" or "[3]" (index into the current array)
_SEGMENT_PATTERN = re.compile(r"^(?P<name>[^\[\]]*)(?:\[(?P<index>\d+)\])?$")


class PathResolver:
    """
    Resolves paths like "Comprobante.Conceptos[0].Impuestos" against parsed JSON.

    Resolution never raises: anything that cannot be followed yields NOT_FOUND.
    """

    @staticmethod
    def resolve(root, path):
        """
        Walk `path` starting at `root`.

        Args:
            root: Parsed JSON (normally an object)
            path: Dot-separated path; each segment is `name` or `name[idx]`,
                and a segment with an empty name indexes the current array

        Returns:
            The node at the end of the path, or NOT_FOUND
        """
        if path is None or not path.strip():
            return root

        current = root
        for segment in path.strip().split("."):
            match = _SEGMENT_PATTERN.match(segment.strip())
            if not match:
                return NOT_FOUND

            name = match.group("name")
            index = match.group("index")

            # Empty segment without an index ("a..b") goes nowhere
            if not name and index is None:
                return NOT_FOUND

            if name:
                if kind_of(current) is not NodeKind.OBJECT or name not in current:
                    return NOT_FOUND
                current = current[name]

            if index is not None:
                position = int(index)
                if kind_of(current) is not NodeKind.ARRAY or position >= len(current):
                    return NOT_FOUND
                current = current[position]

        return current

    @classmethod
    def exists(cls, root, path):
        """Check whether `path` can be followed from `root`."""
        return cls.resolve(root, path) is not NOT_FOUND
