"""Request signing for the PTV Timetable API."""

import hashlib
import hmac
from urllib.parse import urlencode

from commute_coffee.adapters.ptv_api.constants import PTV_BASE_URL


def sign_request(path: str, params: list[tuple[str, str]], dev_id: str, api_key: str) -> str:
    """Build a signed PTV request URL.

    The devid is appended to the query, then the path and query are signed with
    HMAC-SHA1 using the developer key. The signature is an uppercase hex digest.

    Args:
        path: Request path starting with /v3/.
        params: Query parameters in order. Repeated keys are allowed.
        dev_id: PTV developer id.
        api_key: PTV developer key.

    Returns:
        Absolute URL including the devid and signature parameters.
    """
    query = urlencode([*params, ("devid", dev_id)])
    request = f"{path}?{query}"
    signature = hmac.new(api_key.encode("utf-8"), request.encode("utf-8"), hashlib.sha1)
    return f"{PTV_BASE_URL}{request}&signature={signature.hexdigest().upper()}"
