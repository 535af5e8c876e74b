"""Read-only reference data: regions with their sub-regions, and service keywords."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

LOGGER = logging.getLogger(__name__)

US_STATES: Dict[str, Tuple[str, ...]] = {
    "Alabama": ("Birmingham", "Montgomery", "Mobile", "Huntsville", "Tuscaloosa", "Hoover"),
    "Alaska": ("Anchorage", "Fairbanks", "Juneau", "Sitka", "Ketchikan", "Wasilla"),
    "Arizona": ("Phoenix", "Tucson", "Mesa", "Chandler", "Scottsdale", "Glendale"),
    "Arkansas": ("Little Rock", "Fayetteville", "Fort Smith", "Springdale", "Jonesboro", "North Little Rock"),
    "California": ("Los Angeles", "San Diego", "San Jose", "San Francisco", "Fresno", "Sacramento"),
    "Colorado": ("Denver", "Colorado Springs", "Aurora", "Fort Collins", "Lakewood", "Thornton"),
    "Connecticut": ("Bridgeport", "New Haven", "Hartford", "Stamford", "Waterbury", "Norwalk"),
    "Delaware": ("Wilmington", "Dover", "Newark", "Middletown", "Smyrna", "Milford"),
    "Florida": ("Jacksonville", "Miami", "Tampa", "Orlando", "St. Petersburg", "Hialeah"),
    "Georgia": ("Atlanta", "Augusta", "Columbus", "Macon", "Savannah", "Athens"),
    "Hawaii": ("Honolulu", "East Honolulu", "Pearl City", "Hilo", "Waipahu", "Kailua"),
    "Idaho": ("Boise", "Meridian", "Nampa", "Idaho Falls", "Pocatello", "Caldwell"),
    "Illinois": ("Chicago", "Aurora", "Peoria", "Rockford", "Joliet", "Naperville"),
    "Indiana": ("Indianapolis", "Fort Wayne", "Evansville", "South Bend", "Carmel", "Fishers"),
    "Iowa": ("Des Moines", "Cedar Rapids", "Davenport", "Sioux City", "Iowa City", "Waterloo"),
    "Kansas": ("Wichita", "Overland Park", "Kansas City", "Olathe", "Topeka", "Lawrence"),
    "Kentucky": ("Louisville", "Lexington", "Bowling Green", "Owensboro", "Covington", "Hopkinsville"),
    "Louisiana": ("New Orleans", "Baton Rouge", "Shreveport", "Lafayette", "Lake Charles", "Kenner"),
    "Maine": ("Portland", "Lewiston", "Bangor", "South Portland", "Auburn", "Biddeford"),
    "Maryland": ("Baltimore", "Frederick", "Rockville", "Gaithersburg", "Bowie", "Hagerstown"),
    "Massachusetts": ("Boston", "Worcester", "Springfield", "Cambridge", "Lowell", "Brockton"),
    "Michigan": ("Detroit", "Grand Rapids", "Warren", "Sterling Heights", "Lansing", "Ann Arbor"),
    "Minnesota": ("Minneapolis", "Saint Paul", "Rochester", "Duluth", "Bloomington", "Brooklyn Park"),
    "Mississippi": ("Jackson", "Gulfport", "Southaven", "Hattiesburg", "Biloxi", "Meridian"),
    "Missouri": ("Kansas City", "Saint Louis", "Springfield", "Columbia", "Independence", "Lee's Summit"),
    "Montana": ("Billings", "Missoula", "Great Falls", "Bozeman", "Butte", "Helena"),
    "Nebraska": ("Omaha", "Lincoln", "Bellevue", "Grand Island", "Kearney", "Fremont"),
    "Nevada": ("Las Vegas", "Henderson", "Reno", "North Las Vegas", "Sparks", "Carson City"),
    "New Hampshire": ("Manchester", "Nashua", "Concord", "Derry", "Rochester", "Salem"),
    "New Jersey": ("Newark", "Jersey City", "Paterson", "Elizabeth", "Edison", "Woodbridge"),
    "New Mexico": ("Albuquerque", "Las Cruces", "Rio Rancho", "Santa Fe", "Roswell", "Farmington"),
    "New York": ("New York City", "Buffalo", "Rochester", "Yonkers", "Syracuse", "Albany"),
    "North Carolina": ("Charlotte", "Raleigh", "Greensboro", "Durham", "Winston-Salem", "Fayetteville"),
    "North Dakota": ("Fargo", "Bismarck", "Grand Forks", "Minot", "West Fargo", "Dickinson"),
    "Ohio": ("Columbus", "Cleveland", "Cincinnati", "Toledo", "Akron", "Dayton"),
    "Oklahoma": ("Oklahoma City", "Tulsa", "Norman", "Broken Arrow", "Lawton", "Edmond"),
    "Oregon": ("Portland", "Eugene", "Salem", "Gresham", "Hillsboro", "Beaverton"),
    "Pennsylvania": ("Philadelphia", "Pittsburgh", "Allentown", "Erie", "Reading", "Scranton"),
    "Rhode Island": ("Providence", "Warwick", "Cranston", "Pawtucket", "East Providence", "Woonsocket"),
    "South Carolina": ("Charleston", "Columbia", "North Charleston", "Mount Pleasant", "Rock Hill", "Greenville"),
    "South Dakota": ("Sioux Falls", "Rapid City", "Aberdeen", "Brookings", "Watertown", "Mitchell"),
    "Tennessee": ("Memphis", "Nashville", "Knoxville", "Chattanooga", "Clarksville", "Murfreesboro"),
    "Texas": ("Houston", "San Antonio", "Dallas", "Austin", "Fort Worth", "El Paso"),
    "Utah": ("Salt Lake City", "West Valley City", "Provo", "West Jordan", "Orem", "Sandy"),
    "Vermont": ("Burlington", "Essex", "South Burlington", "Colchester", "Rutland", "Bennington"),
    "Virginia": ("Virginia Beach", "Norfolk", "Chesapeake", "Richmond", "Newport News", "Alexandria"),
    "Washington": ("Seattle", "Spokane", "Tacoma", "Vancouver", "Bellevue", "Kent"),
    "West Virginia": ("Charleston", "Huntington", "Morgantown", "Parkersburg", "Wheeling", "Weirton"),
    "Wisconsin": ("Milwaukee", "Madison", "Green Bay", "Kenosha", "Racine", "Appleton"),
    "Wyoming": ("Cheyenne", "Casper", "Laramie", "Gillette", "Rock Springs", "Sheridan"),
}

_WORK = "/work/"
_SERVICES = "/services/"
_PLUGINS = "/services/custom-wordpress-plugin-development/"
_WHITE_LABEL = "/services/white-label-wordpress-development-for-agencies/"

# Insertion order decides which keyword claims a shared URL first.
SERVICE_KEYWORDS: Tuple[Tuple[str, str], ...] = (
    ("API integrations", _SERVICES),
    ("Custom WordPress development", _PLUGINS),
    ("Data migration and platform transfers", _SERVICES),
    ("Platform Migrations", _SERVICES),
    ("White label WordPress development", _WHITE_LABEL),
    ("WordPress Maintenance and Support", _SERVICES),
    ("WordPress development", _WORK),
    ("WordPress maintenance and ongoing support", _SERVICES),
    ("WordPress maintenance", _SERVICES),
    ("WordPress migrations", _SERVICES),
    ("WordPress plugin development services", _PLUGINS),
    ("WordPress plugin development", _PLUGINS),
    ("WordPress security audits and hardening", _SERVICES),
    ("WordPress security audits", _SERVICES),
    ("WordPress security", _SERVICES),
    ("WordPress support", _SERVICES),
    ("WordPress troubleshooting", _SERVICES),
    ("custom WordPress themes", _SERVICES),
    ("custom plugin development", _PLUGINS),
    ("custom theme development", _SERVICES),
    ("data migration", _SERVICES),
    ("digital agency services", _WHITE_LABEL),
    ("platform transfers", _SERVICES),
    ("security audits", _WORK),
    ("theme development", _SERVICES),
    ("web development", _WORK),
    ("white-label development", _WHITE_LABEL),
    ("White Label Development", _WHITE_LABEL),
)


class RegionCatalog:
    """Immutable region -> sub-regions table, in declared order."""

    def __init__(self, regions: Mapping[str, Sequence[str]]):
        self._regions = MappingProxyType({name: tuple(subs) for name, subs in regions.items()})

    def get(self, region: str) -> Optional[Tuple[str, ...]]:
        return self._regions.get(region)

    def has(self, region: str) -> bool:
        return region in self._regions

    def keys(self) -> List[str]:
        return list(self._regions)

    def sub_regions(self, region: str) -> Tuple[str, ...]:
        return self._regions.get(region, ())

    def has_sub_region(self, region: str, sub_region: str) -> bool:
        return sub_region in self.sub_regions(region)

    def __iter__(self) -> Iterator[str]:
        return iter(self._regions)

    def __len__(self) -> int:
        return len(self._regions)


class KeywordCatalog:
    """Immutable keyword -> link target table, in declared order.

    Targets are stored as site-relative paths and resolved against ``site_url``.
    """

    def __init__(self, keywords: Iterable[Tuple[str, str]], site_url: str = ""):
        base = site_url.rstrip("/")
        resolved: Dict[str, str] = {}
        for keyword, target in keywords:
            if keyword in resolved:
                LOGGER.debug("Duplicate keyword '%s' ignored", keyword)
                continue
            resolved[keyword] = target if target.startswith("http") else base + target
        self._keywords = MappingProxyType(resolved)

    def get(self, keyword: str) -> Optional[str]:
        return self._keywords.get(keyword)

    def has(self, keyword: str) -> bool:
        return keyword in self._keywords

    def keys(self) -> List[str]:
        return list(self._keywords)

    def items(self) -> List[Tuple[str, str]]:
        return list(self._keywords.items())

    def __len__(self) -> int:
        return len(self._keywords)


def default_regions() -> RegionCatalog:
    return RegionCatalog(US_STATES)


def default_keywords(site_url: str) -> KeywordCatalog:
    return KeywordCatalog(SERVICE_KEYWORDS, site_url)


__all__ = [
    "KeywordCatalog",
    "RegionCatalog",
    "SERVICE_KEYWORDS",
    "US_STATES",
    "default_keywords",
    "default_regions",
]
