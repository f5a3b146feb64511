"""Static service catalog: what can be booked and where."""

from typing import Optional

SERVICES = {
    "plumbing": "Plumbing",
    "electrical": "Electrical Work",
    "carpentry": "Carpentry",
    "painting": "Painting",
    "cleaning": "Home Cleaning",
    "appliance_repair": "Appliance Repair",
}

LOCATIONS = {
    "kathmandu": "Kathmandu",
    "lalitpur": "Lalitpur",
    "bhaktapur": "Bhaktapur",
    "pokhara": "Pokhara",
    "chitwan": "Chitwan",
}


def service_name(code: str) -> Optional[str]:
    return SERVICES.get(code)


def location_name(code: str) -> Optional[str]:
    return LOCATIONS.get(code)
