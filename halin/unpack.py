from typing import Any, Dict, Iterable, List, Mapping

from halin.errors import UnpackError


def unpack_results(
    records: Iterable[Mapping[str, Any]], required: Iterable[str] = ()
) -> List[Dict[str, Any]]:
    """
    Project driver records onto plain dicts.

    Raises:
        UnpackError: if any record is missing one of the ``required`` fields.
    """
    required = tuple(required)
    unpacked = []
    for index, record in enumerate(records):
        row = dict(record)
        missing = [field for field in required if field not in row]
        if missing:
            raise UnpackError(
                f"Record {index} is missing required field(s): {', '.join(missing)}"
            )
        unpacked.append(row)
    return unpacked
