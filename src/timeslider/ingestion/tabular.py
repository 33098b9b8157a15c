"""
Comma-delimited text splitting.

Pure syntax-level parsing: every cell stays a string and no type
inference happens here.

Limitation: quoting is not supported. A quoted field containing a comma
or a newline splits into the wrong number of cells; such rows parse with
shifted values rather than failing. Existing example files rely on this
simple format.
"""

from timeslider.errors import EmptyInputError
from timeslider.utils.logging import get_logger

log = get_logger(__name__)

DELIMITER = ","


def _split(line: str) -> list[str]:
    return [cell.strip() for cell in line.split(DELIMITER)]


def parse_csv(text: str) -> list[dict[str, str]]:
    """
    Split CSV text into rows keyed by header.

    The first non-empty line is the header. Each following non-empty line
    is zipped positionally against it; missing trailing cells become "",
    surplus cells are dropped.

    Args:
        text: Raw CSV text.

    Returns:
        Rows in source order, keys in column order.

    Raises:
        EmptyInputError: If there is no header plus at least one data line.
    """
    lines = [line.strip() for line in text.split("\n")]
    lines = [line for line in lines if line]

    if len(lines) < 2:
        msg = "CSV must have at least a header row and one data row"
        raise EmptyInputError(msg)

    headers = _split(lines[0])

    rows = []
    ragged = 0
    for line in lines[1:]:
        values = _split(line)
        if len(values) != len(headers):
            ragged += 1
        rows.append(
            {
                header: values[i] if i < len(values) else ""
                for i, header in enumerate(headers)
            }
        )

    if ragged:
        log.debug(
            "Rows with unexpected cell counts",
            ragged=ragged,
            expected=len(headers),
        )

    log.debug("Parsed CSV", rows=len(rows), columns=headers)
    return rows
