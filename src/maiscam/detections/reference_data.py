"""Reference data for detection display and regional rollups.

Language codes reported by the upstream analyzer are mapped to display names,
and each language to the Southeast Asian countries where it is commonly used.
All tables are static; unknown keys fall back to the helpers below.
"""

from typing import Dict, List

# ISO-639-1 style codes mapped to display names.
LANGUAGE_NAMES = {
    "en": "English",
    "ms": "Malay",
    "zh": "Chinese",
    "vi": "Vietnamese",
    "th": "Thai",
    "id": "Indonesian",
    "tl": "Filipino",
    "my": "Burmese",
    "km": "Khmer",
    "lo": "Lao",
    "ta": "Tamil",
    "jv": "Javanese",
    "su": "Sundanese",
}

# Display language names mapped to the countries a detection may originate from.
LANGUAGE_TO_COUNTRIES: Dict[str, List[str]] = {
    "Burmese": ["Myanmar"],
    "Chinese": ["Malaysia", "Singapore"],
    "English": ["Singapore", "Malaysia", "Philippines"],
    "Filipino": ["Philippines"],
    "Indonesian": ["Indonesia"],
    "Javanese": ["Indonesia"],
    "Khmer": ["Cambodia"],
    "Lao": ["Laos"],
    "Malay": ["Malaysia", "Singapore", "Brunei"],
    "Sundanese": ["Indonesia"],
    "Tamil": ["Singapore", "Malaysia"],
    "Thai": ["Thailand"],
    "Vietnamese": ["Vietnam"],
}

COUNTRY_INFO: Dict[str, Dict[str, str]] = {
    "Vietnam": {"flag": "🇻🇳", "population": "97.3M"},
    "Indonesia": {"flag": "🇮🇩", "population": "273.5M"},
    "Thailand": {"flag": "🇹🇭", "population": "69.8M"},
    "Philippines": {"flag": "🇵🇭", "population": "109.6M"},
    "Myanmar": {"flag": "🇲🇲", "population": "54.4M"},
    "Cambodia": {"flag": "🇰🇭", "population": "16.7M"},
    "Laos": {"flag": "🇱🇦", "population": "7.3M"},
    "Malaysia": {"flag": "🇲🇾", "population": "32.4M"},
    "Brunei": {"flag": "🇧🇳", "population": "0.4M"},
    "Singapore": {"flag": "🇸🇬", "population": "5.9M"},
}

UNKNOWN_COUNTRY = "Unknown"
_UNKNOWN_COUNTRY_INFO = {"flag": "🌐", "population": "Unknown"}


def language_display_name(code: str) -> str:
    """Return the display name for a language code, upper-casing unknown codes."""

    return LANGUAGE_NAMES.get(code) or code.upper()


def possible_countries(language: str) -> List[str]:
    """Return the countries associated with a display language name."""

    return list(LANGUAGE_TO_COUNTRIES.get(language) or [UNKNOWN_COUNTRY])


def country_info(country: str) -> Dict[str, str]:
    """Return flag and population metadata for a country."""

    return dict(COUNTRY_INFO.get(country) or _UNKNOWN_COUNTRY_INFO)
