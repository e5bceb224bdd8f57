"""Map free-text provider status strings onto FlightStatus."""

from typing import Optional, Sequence, Tuple

from flightlink.aggregate.models import FlightStatus

StatusRule = Tuple[Tuple[str, ...], FlightStatus]

# Checked in order; the first rule with a keyword contained in the
# lower-cased raw status wins. "incident" and "diverted" fold into
# CANCELLED because the taxonomy has no slot for them.
DEFAULT_STATUS_RULES: Tuple[StatusRule, ...] = (
    (("scheduled",), FlightStatus.SCHEDULED),
    (("active", "airborne", "en-route"), FlightStatus.IN_AIR),
    (("landed",), FlightStatus.LANDED),
    (("cancelled", "incident", "diverted"), FlightStatus.CANCELLED),
    (("delayed",), FlightStatus.DELAYED),
)


def map_status(
    raw: Optional[str], rules: Sequence[StatusRule] = DEFAULT_STATUS_RULES
) -> FlightStatus:
    """Return the FlightStatus for a raw status string, SCHEDULED when nothing matches."""
    if not raw or not isinstance(raw, str):
        return FlightStatus.SCHEDULED

    s = raw.strip().lower()
    for keywords, status in rules:
        if any(k in s for k in keywords):
            return status
    return FlightStatus.SCHEDULED
