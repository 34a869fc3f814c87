"""
Best-effort extraction of a city name from a free-form chat utterance.

Rules are tried in a fixed order and the first hit wins:

1. Japanese place names (substring match on the raw text)
2. English / romanized / Japanese phrase patterns ("weather in X", "trip to X", ...)
3. Whole-word scan of a gazetteer of known cities
4. Fallbacks: "here"/"current location" -> None, bare "Japan" -> Tokyo
5. A lone word that passes candidate validation is taken as the place itself,
   so every name this returns extracts to itself again

This is a heuristic, not a geocoder. It never raises; anything it cannot
resolve comes back as None so the caller can fall back to device location.
"""
import logging
import re
from typing import List, Optional, Pattern, Tuple

from text_normalizer import collapse_whitespace, strip_edge_punctuation

DEFAULT_JAPAN_CITY = "Tokyo"

# Checked in order against the unmodified input.
JAPANESE_PLACE_NAMES: Tuple[Tuple[str, str], ...] = (
    ("東京", "Tokyo"),
    ("大阪", "Osaka"),
    ("京都", "Kyoto"),
    ("横浜", "Yokohama"),
    ("名古屋", "Nagoya"),
    ("福岡", "Fukuoka"),
    ("札幌", "Sapporo"),
    ("仙台", "Sendai"),
    ("広島", "Hiroshima"),
    ("神戸", "Kobe"),
    ("新潟", "Niigata"),
    ("静岡", "Shizuoka"),
    ("熊本", "Kumamoto"),
    ("鹿児島", "Kagoshima"),
    ("長崎", "Nagasaki"),
    ("岡山", "Okayama"),
    ("松山", "Matsuyama"),
    ("高松", "Takamatsu"),
    ("金沢", "Kanazawa"),
    ("富山", "Toyama"),
    ("福井", "Fukui"),
    ("岐阜", "Gifu"),
    ("浜松", "Hamamatsu"),
    ("甲府", "Kofu"),
    ("長野", "Nagano"),
    ("宇都宮", "Utsunomiya"),
    ("前橋", "Maebashi"),
    ("さいたま", "Saitama"),
    ("千葉", "Chiba"),
    ("川崎", "Kawasaki"),
    ("相模原", "Sagamihara"),
    ("横須賀", "Yokosuka"),
    ("那覇", "Naha"),
    ("沖縄", "Okinawa"),
    ("日本", DEFAULT_JAPAN_CITY),  # "Japan" on its own means the default city
    ("オランガバ", "Aurangabad"),
    ("オーランガバード", "Aurangabad"),
    ("ムンバイ", "Mumbai"),
    ("デリー", "Delhi"),
    ("バンガロール", "Bangalore"),
)

_PLACE = r"([a-zA-Z\s,]+)"

LOCATION_PATTERNS: Tuple[Pattern, ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        # weather queries
        rf"weather in {_PLACE}",
        rf"weather for {_PLACE}",
        rf"weather at {_PLACE}",
        rf"how.*weather.*in {_PLACE}",
        rf"what.*weather.*in {_PLACE}",
        rf"tell me.*weather.*in {_PLACE}",
        rf"show.*weather.*in {_PLACE}",
        rf"check.*weather.*in {_PLACE}",
        # travel plans
        rf"going to {_PLACE}",
        rf"plan.*going to {_PLACE}",
        rf"planning.*to.*go.*to {_PLACE}",
        rf"trip to {_PLACE}",
        rf"travel.*to {_PLACE}",
        rf"visiting {_PLACE}",
        rf"visit {_PLACE}",
        rf"plan.*visit.*{_PLACE}",
        rf"weather.*{_PLACE}.*tomorrow",
        rf"weather.*{_PLACE}.*next week",
        rf"weather.*{_PLACE}.*after.*week",
        rf"about.*weather.*{_PLACE}",
        # romanized Japanese ("Tokyo no tenki")
        rf"{_PLACE}.*no.*tenki",
        r"([a-zA-Z]+).*weather",
        # katakana / kanji place followed by 天気
        r"([ァ-ヶー]+).*の.*天気",
        r"([一-龯]+).*の.*天気",
    )
)

STOP_WORDS = re.compile(
    r"\b(today|tomorrow|now|currently|right now|this morning|tonight|weather|forecast|"
    r"after|week|next|plan|planning|trip|travel|visiting|visit|about|the|a|an|and|or|"
    r"but|so|tell|me|show|check|how|what|is|are|will|be|going|to|five|day|days|hour|"
    r"hours|minute|minutes)\b",
    re.IGNORECASE,
)

EXCLUDED_CANDIDATES = re.compile(
    r"^(five|day|days|week|weeks|hour|hours|minute|minutes|forecast|weather|current|"
    r"today|tomorrow|\d+)$",
    re.IGNORECASE,
)

MIN_CANDIDATE_LENGTH = 3
MAX_CANDIDATE_LENGTH = 49

_JAPANESE_CITIES = (
    "tokyo", "osaka", "kyoto", "yokohama", "nagoya", "fukuoka", "sapporo",
    "sendai", "hiroshima", "kobe", "niigata", "shizuoka", "kumamoto", "kagoshima",
    "nagasaki", "okayama", "matsuyama", "takamatsu", "kanazawa", "toyama", "fukui",
    "gifu", "hamamatsu", "kofu", "nagano", "utsunomiya", "maebashi", "saitama",
    "chiba", "kawasaki", "sagamihara", "yokosuka", "naha", "okinawa",
)

_INTERNATIONAL_CITIES = (
    "new york", "london", "paris", "berlin", "rome", "madrid", "amsterdam",
    "sydney", "melbourne", "toronto", "vancouver", "singapore", "hong kong",
    "seoul", "beijing", "shanghai", "bangkok",
)

_INDIAN_CITIES = (
    # metropolitan
    "mumbai", "delhi", "bangalore", "hyderabad", "ahmedabad", "chennai", "kolkata",
    "pune", "jaipur", "surat", "lucknow", "kanpur", "nagpur", "indore", "thane",
    "bhopal", "visakhapatnam", "pimpri", "patna", "vadodara", "ghaziabad", "ludhiana",
    "agra", "nashik", "faridabad", "meerut", "rajkot", "kalyan", "vasai", "varanasi",
    "srinagar", "aurangabad", "dhanbad", "amritsar", "navi mumbai", "allahabad",
    "ranchi", "howrah", "coimbatore", "gwalior", "vijayawada", "jodhpur",
    "madurai", "raipur", "kota", "guwahati", "chandigarh", "solapur", "hubli",
    "jabalpur", "bhubaneswar", "mysore", "tiruchirappalli", "salem", "warangal",
    "guntur", "bhiwandi", "saharanpur", "gorakhpur", "bikaner", "amravati",
    "noida", "jamshedpur", "bhilai", "cuttack", "kochi", "raigarh", "jalandhar",
    "tirunelveli", "mangalore", "thrissur", "kollam", "tirupati", "kakinada",
    "belgaum", "rajahmundry", "nellore", "kurnool", "tumkur", "gulbarga",
    "davanagere", "bellary", "bijapur", "raichur", "bidar", "hospet", "gadag",
    "shimoga", "udupi", "chikmagalur", "hassan", "mandya", "mysuru",
    # north
    "dehradun", "haridwar", "rishikesh", "mussoorie", "nainital", "shimla", "manali",
    "dharamshala", "mcleodganj", "kasauli", "dalhousie", "kullu", "spiti", "leh",
    "ladakh", "jammu", "udaipur", "mount abu", "jaisalmer", "pushkar",
    "ajmer", "bundi", "chittorgarh", "bharatpur", "alwar", "sikar",
    # east
    "puri", "konark", "rourkela", "sambalpur", "berhampur",
    "siliguri", "darjeeling", "kalimpong", "gangtok", "shillong", "aizawl", "imphal",
    "agartala", "kohima", "dimapur", "itanagar", "dispur",
    # west
    "goa", "panaji", "margao", "vasco", "mapusa", "ponda", "calangute", "anjuna",
    "baroda", "bhavnagar", "jamnagar", "gandhinagar", "anand", "nadiad", "bharuch",
    "valsad", "navsari", "daman", "diu", "silvassa",
    # south
    "trivandrum", "calicut", "alappuzha", "kottayam",
    "palakkad", "kannur", "kasargod", "wayanad", "munnar", "thekkady",
    "pondicherry", "cuddalore", "vellore", "erode", "tiruppur", "karur",
    "dindigul", "theni", "tuticorin", "nagercoil", "kanyakumari", "ooty", "kodaikanal",
    "coonoor", "yercaud", "valparai",
    "ballia", "ballia city",
)

_US_CITIES = (
    "los angeles", "chicago", "houston", "phoenix", "philadelphia", "san antonio",
    "san diego", "dallas", "san jose", "austin", "jacksonville", "san francisco",
    "columbus", "charlotte", "fort worth", "detroit", "el paso", "memphis",
    "seattle", "denver", "washington", "boston", "nashville", "baltimore",
    "louisville", "portland", "oklahoma city", "milwaukee", "las vegas",
)

KNOWN_CITIES: Tuple[str, ...] = tuple(
    dict.fromkeys(_JAPANESE_CITIES + _INTERNATIONAL_CITIES + _INDIAN_CITIES + _US_CITIES)
)

_CITY_PATTERNS: List[Tuple[str, Pattern]] = [
    (city, re.compile(rf"\b{re.escape(city)}\b", re.IGNORECASE)) for city in KNOWN_CITIES
]

_HERE_WORDS = ("current", "here", "my location")
_LONE_WORD = re.compile(r"^(?:[A-Za-z]+|[ァ-ヶー]+|[一-龯]+)$")


def title_case(location: str) -> str:
    """Capitalize each space-separated word ("new york" -> "New York")."""
    return " ".join(word[:1].upper() + word[1:].lower() for word in location.split(" "))


def clean_candidate(raw: str) -> Optional[str]:
    """
    Turn a captured phrase into a place name, or None if it does not look like one.

    Stop words are removed, and of what is left only the first word is kept
    so that trailing qualifiers ("Aurangabad Maharashtra") are dropped.
    """
    location = collapse_whitespace(STOP_WORDS.sub("", raw.strip()))
    words = location.split(" ")
    if len(words) > 1:
        location = words[0]
    location = strip_edge_punctuation(location)

    if not MIN_CANDIDATE_LENGTH <= len(location) <= MAX_CANDIDATE_LENGTH:
        return None
    if EXCLUDED_CANDIDATES.match(location):
        return None
    return title_case(location)


def extract_location(text: str) -> Optional[str]:
    """
    Extract a best-guess city name from user text.

    Args:
        text: Raw user input (typed or transcribed), English or Japanese

    Returns:
        City name suitable for the weather provider, or None when nothing
        usable was found (caller should use device geolocation instead)
    """
    if not text:
        return None

    for japanese, english in JAPANESE_PLACE_NAMES:
        if japanese in text:
            logging.debug(f"Japanese place name match: {japanese} -> {english}")
            return english

    for pattern in LOCATION_PATTERNS:
        match = pattern.search(text)
        if not match or not match.group(1):
            continue
        candidate = clean_candidate(match.group(1))
        if candidate:
            logging.debug(f"Pattern match: {pattern.pattern!r} -> {candidate}")
            return candidate

    for city, city_pattern in _CITY_PATTERNS:
        if city_pattern.search(text):
            logging.debug(f"Known city match: {city}")
            return title_case(city)

    normalized = text.lower()
    if any(word in normalized for word in _HERE_WORDS):
        return None
    if "japan" in normalized and " in " not in normalized:
        return DEFAULT_JAPAN_CITY

    if len(text.split()) == 1:
        candidate = clean_candidate(text)
        if candidate and _LONE_WORD.match(candidate):
            logging.debug(f"Lone word taken as place: {candidate}")
            return candidate

    return None
