#!/usr/bin/env python3
"""
Address lookups through the positionstack geocoding API.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union
import logging
import requests

from .geometry import Point

DEFAULT_API_TIMEOUT = 30
POSITIONSTACK_API_URL = "https://api.positionstack.com/v1"

logger = logging.getLogger(__name__)


class AddressLookupError(Exception):
    """Raised when positionstack cannot resolve an address or coordinate."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


@dataclass
class Address:
    """A postal address as returned by positionstack."""

    street: List[str] = field(default_factory=list)
    city: str = ""
    state: str = ""
    county: str = ""
    postal_code: str = ""
    country: str = ""
    text: str = ""
    location: Optional[Point] = None

    def to_dict(self) -> Dict[str, Any]:
        """Non-empty fields keyed as in the shell's JSON output."""
        result: Dict[str, Any] = {}
        if self.street:
            result["street"] = list(self.street)
        for key, value in (
            ("city", self.city),
            ("county", self.county),
            ("state", self.state),
            ("postalCode", self.postal_code),
            ("country", self.country),
        ):
            if value:
                result[key] = value
        if self.location is not None:
            result["distance"] = self.location.accuracy
        return result


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _string_field(entry: Dict[str, Any], *keys: str) -> str:
    """First string value among the given keys, or an empty string."""
    for key in keys:
        value = entry.get(key)
        if isinstance(value, str):
            return value
    return ""


def _query(endpoint: str, query: str, key: str, context: str, timeout: int) -> Dict[str, Any]:
    """
    Send a positionstack request and return the first entry of its data array.

    Args:
        endpoint: "reverse" or "forward"
        query: Query string for the request
        key: positionstack API key
        context: Description of the lookup for log messages
        timeout: Request timeout in seconds

    Raises:
        AddressLookupError: For transport errors, non-200 responses and
            responses without a usable data entry
    """
    try:
        response = requests.get(
            f"{POSITIONSTACK_API_URL}/{endpoint}",
            params={"access_key": key, "query": query, "output": "json", "limit": "1"},
            timeout=timeout,
        )
    except requests.exceptions.RequestException as e:
        logger.warning(f"Error retrieving address for {context}. {e}")
        raise AddressLookupError(str(e)) from e

    if response.status_code != 200:
        logger.warning(
            f"Error retrieving address for {context}. "
            f"Response status {response.status_code} {response.reason}. {response.text}"
        )
        raise AddressLookupError(response.text)

    try:
        doc = response.json()
    except ValueError as e:
        logger.warning(f"Error parsing response for {context}. Error: {e}")
        raise AddressLookupError(str(e)) from e

    if not isinstance(doc, dict) or "data" not in doc:
        logger.warning(f"No data in response for {context}. {response.text}")
        raise AddressLookupError("No data in response")

    data = doc["data"]
    if not isinstance(data, list):
        logger.warning(f"data not array in response for {context}. {response.text}")
        raise AddressLookupError("Invalid type for data in response")

    if not data:
        logger.warning(f"data array empty in response for {context}. {response.text}")
        raise AddressLookupError("Empty response data")

    entry = data[0]
    if not isinstance(entry, dict):
        logger.warning(
            f"data array entry not object in response for {context}. {response.text}"
        )
        raise AddressLookupError("Non-object in data array")

    return entry


def reverse_geocode(
    latitude: float, longitude: float, key: str, timeout: int = DEFAULT_API_TIMEOUT
) -> Address:
    """
    Look up the closest approximate address for the geo-location.

    Args:
        latitude: Latitude of the location in decimal degrees
        longitude: Longitude of the location in decimal degrees
        key: positionstack API key
        timeout: Request timeout in seconds

    Returns:
        The address. Its location is the queried coordinate, with the distance
        reported by positionstack as accuracy.

    Raises:
        AddressLookupError: If the lookup fails
    """
    entry = _query(
        "reverse",
        f"{latitude},{longitude}",
        key,
        f"latitude: {latitude}; longitude: {longitude}",
        timeout,
    )

    street = entry.get("name")
    distance = entry.get("distance")
    return Address(
        street=[street] if isinstance(street, str) else [],
        city=_string_field(entry, "locality"),
        state=_string_field(entry, "region", "region_code"),
        county=_string_field(entry, "county"),
        postal_code=_string_field(entry, "postal_code"),
        country=_string_field(entry, "country", "country_code"),
        text=_string_field(entry, "label"),
        location=Point(
            latitude=latitude,
            longitude=longitude,
            accuracy=float(distance) if _is_number(distance) else 0.0,
        ),
    )


def forward_geocode(
    address: Union[str, Address], key: str, timeout: int = DEFAULT_API_TIMEOUT
) -> Point:
    """
    Look up the geo-coordinates for the address.

    Args:
        address: Address text, or an Address whose text is used
        key: positionstack API key
        timeout: Request timeout in seconds

    Returns:
        The coordinate, with the distance reported by positionstack as accuracy

    Raises:
        AddressLookupError: If the address is empty or the lookup fails
    """
    text = address.text if isinstance(address, Address) else address
    if not text:
        raise AddressLookupError("Empty address")

    entry = _query("forward", text, key, f"address: {text}", timeout)

    if "latitude" not in entry or "longitude" not in entry:
        logger.warning(
            f"data array entry does not contain geocodes in response for address: {text}"
        )
        raise AddressLookupError("Data does not contain coordinates")

    latitude = entry["latitude"]
    longitude = entry["longitude"]
    distance = entry.get("distance")
    return Point(
        latitude=float(latitude) if _is_number(latitude) else 0.0,
        longitude=float(longitude) if _is_number(longitude) else 0.0,
        accuracy=float(distance) if _is_number(distance) else 0.0,
    )
