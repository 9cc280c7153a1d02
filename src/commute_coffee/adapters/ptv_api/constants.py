"""Constants for the PTV Timetable API adapter.

Uses the PTV Timetable API v3. Every request carries a developer id and an HMAC-SHA1
signature of the request path made with the developer key.
API Documentation: https://timetableapi.ptv.vic.gov.au/swagger/ui/index
"""

from commute_coffee.domain.models.transport_mode import TransportMode

PTV_BASE_URL = "https://timetableapi.ptv.vic.gov.au"
PTV_DEPARTURES_PATH = "/v3/departures/route_type/{route_type}/stop/{stop_id}"

# PTV route types
ROUTE_TYPES = {
    TransportMode.TRAIN: 0,
    TransportMode.TRAM: 1,
}

DEFAULT_HEADERS = {
    "Accept": "application/json",
}
