#!/usr/bin/env python3
"""
Region Lookup - Map free-text place names to Philippine administrative regions.

The table covers provinces, highly urbanized cities and the usual region
names/codes, so that "Mandaue City" and "Cebu" both resolve to Central
Visayas. It is a constant, read-only collaborator of the LocationMatcher and
is safe to share between threads.
"""

import re
from typing import Dict, Iterable, Mapping, Optional

from kindmatch.utils import normalize_text

NCR = "National Capital Region"
CAR = "Cordillera Administrative Region"
ILOCOS = "Ilocos Region"
CAGAYAN_VALLEY = "Cagayan Valley"
CENTRAL_LUZON = "Central Luzon"
CALABARZON = "CALABARZON"
MIMAROPA = "MIMAROPA"
BICOL = "Bicol Region"
WESTERN_VISAYAS = "Western Visayas"
CENTRAL_VISAYAS = "Central Visayas"
EASTERN_VISAYAS = "Eastern Visayas"
ZAMBOANGA = "Zamboanga Peninsula"
NORTHERN_MINDANAO = "Northern Mindanao"
DAVAO = "Davao Region"
SOCCSKSARGEN = "SOCCSKSARGEN"
CARAGA = "Caraga"
BARMM = "Bangsamoro Autonomous Region in Muslim Mindanao"

# Region names, numbered codes and common aliases
REGION_ALIASES: Dict[str, str] = {
    "ncr": NCR, "metro manila": NCR, "national capital region": NCR,
    "car": CAR, "cordillera": CAR, "cordillera administrative region": CAR,
    "region i": ILOCOS, "region 1": ILOCOS, "ilocos": ILOCOS, "ilocos region": ILOCOS,
    "region ii": CAGAYAN_VALLEY, "region 2": CAGAYAN_VALLEY, "cagayan valley": CAGAYAN_VALLEY,
    "region iii": CENTRAL_LUZON, "region 3": CENTRAL_LUZON, "central luzon": CENTRAL_LUZON,
    "region iv-a": CALABARZON, "region 4a": CALABARZON, "calabarzon": CALABARZON,
    "region iv-b": MIMAROPA, "region 4b": MIMAROPA, "mimaropa": MIMAROPA,
    "region v": BICOL, "region 5": BICOL, "bicol": BICOL, "bicol region": BICOL,
    "region vi": WESTERN_VISAYAS, "region 6": WESTERN_VISAYAS, "western visayas": WESTERN_VISAYAS,
    "region vii": CENTRAL_VISAYAS, "region 7": CENTRAL_VISAYAS, "central visayas": CENTRAL_VISAYAS,
    "region viii": EASTERN_VISAYAS, "region 8": EASTERN_VISAYAS, "eastern visayas": EASTERN_VISAYAS,
    "region ix": ZAMBOANGA, "region 9": ZAMBOANGA, "zamboanga peninsula": ZAMBOANGA,
    "region x": NORTHERN_MINDANAO, "region 10": NORTHERN_MINDANAO, "northern mindanao": NORTHERN_MINDANAO,
    "region xi": DAVAO, "region 11": DAVAO, "davao region": DAVAO,
    "region xii": SOCCSKSARGEN, "region 12": SOCCSKSARGEN, "soccsksargen": SOCCSKSARGEN,
    "region xiii": CARAGA, "region 13": CARAGA, "caraga": CARAGA,
    "barmm": BARMM, "bangsamoro": BARMM, "armm": BARMM,
}

# Provinces and cities
PLACE_REGIONS: Dict[str, str] = {
    # NCR
    "manila": NCR, "quezon city": NCR, "makati": NCR, "pasig": NCR, "taguig": NCR,
    "mandaluyong": NCR, "pasay": NCR, "caloocan": NCR, "paranaque": NCR, "parañaque": NCR,
    "las pinas": NCR, "las piñas": NCR, "muntinlupa": NCR, "marikina": NCR,
    "valenzuela": NCR, "malabon": NCR, "navotas": NCR, "san juan": NCR, "pateros": NCR,
    # CAR
    "abra": CAR, "apayao": CAR, "benguet": CAR, "ifugao": CAR, "kalinga": CAR,
    "mountain province": CAR, "baguio": CAR,
    # Region I
    "ilocos norte": ILOCOS, "ilocos sur": ILOCOS, "la union": ILOCOS, "pangasinan": ILOCOS,
    "laoag": ILOCOS, "vigan": ILOCOS, "dagupan": ILOCOS,
    # Region II
    "batanes": CAGAYAN_VALLEY, "cagayan": CAGAYAN_VALLEY, "isabela": CAGAYAN_VALLEY,
    "nueva vizcaya": CAGAYAN_VALLEY, "quirino": CAGAYAN_VALLEY, "tuguegarao": CAGAYAN_VALLEY,
    # Region III
    "aurora": CENTRAL_LUZON, "bataan": CENTRAL_LUZON, "bulacan": CENTRAL_LUZON,
    "nueva ecija": CENTRAL_LUZON, "pampanga": CENTRAL_LUZON, "tarlac": CENTRAL_LUZON,
    "zambales": CENTRAL_LUZON, "angeles": CENTRAL_LUZON, "olongapo": CENTRAL_LUZON,
    "malolos": CENTRAL_LUZON,
    # Region IV-A
    "batangas": CALABARZON, "cavite": CALABARZON, "laguna": CALABARZON, "quezon": CALABARZON,
    "rizal": CALABARZON, "antipolo": CALABARZON, "calamba": CALABARZON, "lucena": CALABARZON,
    "dasmarinas": CALABARZON, "dasmariñas": CALABARZON, "bacoor": CALABARZON,
    "imus": CALABARZON, "santa rosa": CALABARZON, "lipa": CALABARZON,
    # Region IV-B
    "marinduque": MIMAROPA, "occidental mindoro": MIMAROPA, "oriental mindoro": MIMAROPA,
    "palawan": MIMAROPA, "romblon": MIMAROPA, "puerto princesa": MIMAROPA, "calapan": MIMAROPA,
    # Region V
    "albay": BICOL, "camarines norte": BICOL, "camarines sur": BICOL, "catanduanes": BICOL,
    "masbate": BICOL, "sorsogon": BICOL, "legazpi": BICOL,
    # Region VI
    "aklan": WESTERN_VISAYAS, "antique": WESTERN_VISAYAS, "capiz": WESTERN_VISAYAS,
    "guimaras": WESTERN_VISAYAS, "iloilo": WESTERN_VISAYAS,
    "negros occidental": WESTERN_VISAYAS, "bacolod": WESTERN_VISAYAS, "roxas": WESTERN_VISAYAS,
    # Region VII
    "bohol": CENTRAL_VISAYAS, "cebu": CENTRAL_VISAYAS, "negros oriental": CENTRAL_VISAYAS,
    "siquijor": CENTRAL_VISAYAS, "mandaue": CENTRAL_VISAYAS, "lapu-lapu": CENTRAL_VISAYAS,
    "lapu lapu": CENTRAL_VISAYAS, "talisay": CENTRAL_VISAYAS, "tagbilaran": CENTRAL_VISAYAS,
    "dumaguete": CENTRAL_VISAYAS, "toledo": CENTRAL_VISAYAS, "danao": CENTRAL_VISAYAS,
    "carcar": CENTRAL_VISAYAS, "consolacion": CENTRAL_VISAYAS, "liloan": CENTRAL_VISAYAS,
    # Region VIII
    "biliran": EASTERN_VISAYAS, "eastern samar": EASTERN_VISAYAS, "leyte": EASTERN_VISAYAS,
    "northern samar": EASTERN_VISAYAS, "samar": EASTERN_VISAYAS,
    "southern leyte": EASTERN_VISAYAS, "tacloban": EASTERN_VISAYAS,
    "ormoc": EASTERN_VISAYAS, "calbayog": EASTERN_VISAYAS,
    # Region IX
    "zamboanga del norte": ZAMBOANGA, "zamboanga del sur": ZAMBOANGA,
    "zamboanga sibugay": ZAMBOANGA, "zamboanga": ZAMBOANGA, "dipolog": ZAMBOANGA,
    "pagadian": ZAMBOANGA,
    # Region X
    "bukidnon": NORTHERN_MINDANAO, "camiguin": NORTHERN_MINDANAO,
    "lanao del norte": NORTHERN_MINDANAO, "misamis occidental": NORTHERN_MINDANAO,
    "misamis oriental": NORTHERN_MINDANAO, "cagayan de oro": NORTHERN_MINDANAO,
    "iligan": NORTHERN_MINDANAO, "malaybalay": NORTHERN_MINDANAO,
    # Region XI
    "davao de oro": DAVAO, "davao del norte": DAVAO, "davao del sur": DAVAO,
    "davao occidental": DAVAO, "davao oriental": DAVAO, "davao": DAVAO,
    "tagum": DAVAO, "digos": DAVAO,
    # Region XII
    "cotabato": SOCCSKSARGEN, "sarangani": SOCCSKSARGEN, "south cotabato": SOCCSKSARGEN,
    "sultan kudarat": SOCCSKSARGEN, "general santos": SOCCSKSARGEN,
    "koronadal": SOCCSKSARGEN, "kidapawan": SOCCSKSARGEN,
    # Region XIII
    "agusan del norte": CARAGA, "agusan del sur": CARAGA, "dinagat islands": CARAGA,
    "surigao del norte": CARAGA, "surigao del sur": CARAGA, "butuan": CARAGA,
    "surigao": CARAGA,
    # BARMM
    "basilan": BARMM, "lanao del sur": BARMM, "maguindanao": BARMM, "sulu": BARMM,
    "tawi-tawi": BARMM, "marawi": BARMM,
}

_PARENTHETICAL_RE = re.compile(r"\(([^)]*)\)")
_CITY_AFFIX_RE = re.compile(r"^city of\s+|\s+city$")


class RegionLookup:
    """Resolve place names to regions."""

    def __init__(self, overrides: Optional[Mapping[str, str]] = None):
        self._regions: Dict[str, str] = {}
        for alias, region in REGION_ALIASES.items():
            self._regions[alias] = region
        for place, region in PLACE_REGIONS.items():
            self._regions[place] = region
        # Canonical region names resolve to themselves
        for region in set(REGION_ALIASES.values()):
            self._regions[normalize_text(region)] = region

        for place, region in (overrides or {}).items():
            self._regions[normalize_text(place)] = self._resolve_one(normalize_text(region)) or region

    def _resolve_one(self, key: str) -> Optional[str]:
        if not key:
            return None
        region = self._regions.get(key)
        if region:
            return region
        stripped = _CITY_AFFIX_RE.sub("", key).strip()
        if stripped != key:
            return self._regions.get(stripped)
        return None

    def _candidates(self, text: str) -> Iterable[str]:
        n = normalize_text(text)
        yield n
        # "Central Visayas (Region VII)" → "central visayas", "region vii"
        inner = _PARENTHETICAL_RE.findall(n)
        outer = normalize_text(_PARENTHETICAL_RE.sub(" ", n))
        if outer != n:
            yield outer
        for part in inner:
            yield normalize_text(part)
        # "Cebu City, Central Visayas" → "cebu city", "central visayas"
        if "," in outer:
            for part in outer.split(","):
                yield normalize_text(part)

    def region_for(self, text: Optional[str]) -> Optional[str]:
        """Return the canonical region name for a place or region string, or None."""
        if not text:
            return None
        for candidate in self._candidates(text):
            region = self._resolve_one(candidate)
            if region:
                return region
        return None

    def same_region(self, a: Optional[str], b: Optional[str]) -> bool:
        region_a = self.region_for(a)
        return region_a is not None and region_a == self.region_for(b)
