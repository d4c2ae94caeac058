import logging
import math
import re
import time
from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Callable, Dict, Optional


GENERATION_ERROR_MESSAGE = "Failed to generate weather data. Please check your postal code and try again."

MIN_POSTAL_CODE_LENGTH = 3
MAX_POSTAL_CODE_LENGTH = 10

FREEZING_F = 32


class SnowDayError(Exception):
    """Base error for the snow day calculator."""


class ValidationError(SnowDayError, ValueError):
    """Postal code failed validation."""


class GenerationError(SnowDayError, RuntimeError):
    """Weather data could not be generated for a postal code."""


class Region(Enum):
    """Weather region derived from a postal code prefix. Values are display labels."""

    # United States
    NEW_ENGLAND = "New England"
    NEW_YORK_NEW_JERSEY = "New York/New Jersey"
    MID_ATLANTIC = "Mid-Atlantic"
    SOUTHEAST = "Southeast"
    GREAT_LAKES = "Great Lakes"
    MIDWEST = "Midwest"
    SOUTH_CENTRAL = "South Central"
    MOUNTAIN = "Mountain"
    WEST_COAST = "West Coast"
    UNITED_STATES = "United States"

    # Canada
    NEWFOUNDLAND = "Newfoundland"
    NOVA_SCOTIA = "Nova Scotia"
    PRINCE_EDWARD_ISLAND = "Prince Edward Island"
    NEW_BRUNSWICK = "New Brunswick"
    QUEBEC_EAST = "Quebec (East)"
    QUEBEC_MONTREAL = "Quebec (Montreal)"
    QUEBEC_WEST = "Quebec (West)"
    ONTARIO_EAST = "Ontario (East)"
    ONTARIO_CENTRAL = "Ontario (Central)"
    ONTARIO_TORONTO = "Ontario (Toronto)"
    ONTARIO_SOUTHWEST = "Ontario (Southwest)"
    ONTARIO_NORTH = "Ontario (North)"
    MANITOBA = "Manitoba"
    SASKATCHEWAN = "Saskatchewan"
    ALBERTA = "Alberta"
    BRITISH_COLUMBIA = "British Columbia"
    NORTHWEST_TERRITORIES_NUNAVUT = "Northwest Territories/Nunavut"
    YUKON = "Yukon"
    CANADA = "Canada"


US_PREFIX_TO_REGION: Dict[str, Region] = {
    '0': Region.NEW_ENGLAND,
    '1': Region.NEW_YORK_NEW_JERSEY,
    '2': Region.MID_ATLANTIC,
    '3': Region.SOUTHEAST,
    '4': Region.GREAT_LAKES,
    '5': Region.MIDWEST,
    '6': Region.SOUTH_CENTRAL,
    '7': Region.SOUTH_CENTRAL,
    '8': Region.MOUNTAIN,
    '9': Region.WEST_COAST,
}

CANADIAN_LETTER_TO_REGION: Dict[str, Region] = {
    'A': Region.NEWFOUNDLAND,
    'B': Region.NOVA_SCOTIA,
    'C': Region.PRINCE_EDWARD_ISLAND,
    'E': Region.NEW_BRUNSWICK,
    'G': Region.QUEBEC_EAST,
    'H': Region.QUEBEC_MONTREAL,
    'J': Region.QUEBEC_WEST,
    'K': Region.ONTARIO_EAST,
    'L': Region.ONTARIO_CENTRAL,
    'M': Region.ONTARIO_TORONTO,
    'N': Region.ONTARIO_SOUTHWEST,
    'P': Region.ONTARIO_NORTH,
    'R': Region.MANITOBA,
    'S': Region.SASKATCHEWAN,
    'T': Region.ALBERTA,
    'V': Region.BRITISH_COLUMBIA,
    'X': Region.NORTHWEST_TERRITORIES_NUNAVUT,
    'Y': Region.YUKON,
}

CANADIAN_FORMAT = re.compile(r'^[A-Z][0-9][A-Z]')

# Regions that get the heavier snowfall multiplier and the northern condition labels
NORTHERN_REGIONS = frozenset({
    Region.NEW_ENGLAND,
    Region.GREAT_LAKES,
    Region.MIDWEST,
    Region.MOUNTAIN,
    Region.MANITOBA,
    Region.SASKATCHEWAN,
    Region.ALBERTA,
    Region.YUKON,
})

MID_REGIONS = frozenset({
    Region.NEW_YORK_NEW_JERSEY,
    Region.MID_ATLANTIC,
    Region.ONTARIO_NORTH,
    Region.ONTARIO_EAST,
    Region.QUEBEC_EAST,
    Region.QUEBEC_WEST,
})

WARM_REGIONS = frozenset({Region.SOUTHEAST, Region.SOUTH_CENTRAL, Region.WEST_COAST})

COLD_REGIONS = frozenset({
    Region.NEW_ENGLAND,
    Region.GREAT_LAKES,
    Region.MIDWEST,
    Region.MOUNTAIN,
    Region.YUKON,
    Region.NORTHWEST_TERRITORIES_NUNAVUT,
})

# Quebec regions are not part of this bucket and keep the default base
PRAIRIE_REGIONS = frozenset({Region.MANITOBA, Region.SASKATCHEWAN, Region.ALBERTA})

BASE_TEMPERATURES = (
    (WARM_REGIONS, 45),
    (COLD_REGIONS, 20),
    (PRAIRIE_REGIONS, 15),
)
DEFAULT_BASE_TEMPERATURE = 32

PROBABILITY_MESSAGES = (
    (90, "Almost certain! Get your sled ready!"),
    (70, "Very likely! Plan for a day off school."),
    (50, "Good chance! Keep your fingers crossed."),
    (30, "There's hope, but don't count on it."),
)
DEFAULT_MESSAGE = "Not looking likely. Better finish your homework."


@dataclass(frozen=True)
class Classification:
    location: str
    region: Region


@dataclass(frozen=True)
class WeatherData:
    """
    Synthesized weather for one postal code.

    Units are fixed: temperature in °F, snowfall in inches (one decimal),
    wind speed in mph.
    """

    temperature: int
    snowfall: float
    wind_speed: int
    conditions: str
    location: str

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class Score:
    probability: int
    message: str


@dataclass(frozen=True)
class SnowDayResult:
    probability: int
    temperature: int
    snowfall: float
    wind_speed: int
    conditions: str
    location: str
    message: str

    def to_dict(self) -> Dict:
        return asdict(self)


# -------------------------
# Deterministic random numbers
# -------------------------

def seed_from_postal_code(postal_code: str) -> int:
    """Sum of the character codes of the raw (untrimmed, unnormalized) input."""
    return sum(ord(char) for char in postal_code)


class SeededRandom:
    """
    Linear-congruential generator seeded from a postal code.

    Same seed, same sequence. Nothing global is touched, so a fresh
    instance per request keeps calls independent.
    """

    MULTIPLIER = 9301
    INCREMENT = 49297
    MODULUS = 233280

    def __init__(self, seed: int):
        self.state = seed

    def next(self) -> float:
        self.state = (self.state * self.MULTIPLIER + self.INCREMENT) % self.MODULUS
        return self.state / self.MODULUS

    def __call__(self) -> float:
        return self.next()


# -------------------------
# Postal code classification
# -------------------------

def validate_postal_code(postal_code) -> str:
    """Return the input unchanged if it is a string of 3-10 characters once trimmed."""
    if not isinstance(postal_code, str):
        raise ValidationError(f"Postal code must be a string, got {type(postal_code).__name__}")
    length = len(postal_code.strip())
    if length < MIN_POSTAL_CODE_LENGTH or length > MAX_POSTAL_CODE_LENGTH:
        raise ValidationError(
            f"Postal code must be {MIN_POSTAL_CODE_LENGTH}-{MAX_POSTAL_CODE_LENGTH} characters, got {length}"
        )
    return postal_code


def normalize_postal_code(postal_code: str) -> str:
    return re.sub(r'\s+', '', postal_code).upper()


def describe_location(postal_code: str) -> str:
    code = normalize_postal_code(postal_code)

    if CANADIAN_FORMAT.match(code):
        region = CANADIAN_LETTER_TO_REGION.get(code[0], Region.CANADA)
        return f"Postal Code {code}, {region.value}"

    region = US_PREFIX_TO_REGION.get(code[0], Region.UNITED_STATES)
    return f"ZIP Code {code}, {region.value}"


def region_from_location(location: str) -> Region:
    """Read the region back out of a location string ("<kind> <code>, <region>")."""
    parts = location.split(", ")
    if len(parts) > 1:
        return Region(parts[1])
    return Region.UNITED_STATES


def classify_postal_code(postal_code: str) -> Classification:
    validate_postal_code(postal_code)
    location = describe_location(postal_code)
    return Classification(location=location, region=region_from_location(location))


# -------------------------
# Weather synthesis
# -------------------------

def _round_half_up(value: float) -> int:
    # Ties go toward +infinity, so -2.5 rounds to -2
    return math.floor(value + 0.5)


def _round_tenths(value: float) -> float:
    return float(Decimal(value).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP))


def base_temperature(region: Region) -> int:
    for regions, temperature in BASE_TEMPERATURES:
        if region in regions:
            return temperature
    return DEFAULT_BASE_TEMPERATURE


def describe_conditions(region: Region, temperature: int) -> str:
    """
    Pick a condition label for a region and temperature.

    Regional rules are checked first; a region above its own threshold
    falls through to the temperature-only bands.
    """
    if region in NORTHERN_REGIONS and temperature < 32:
        if temperature < 15:
            return "Heavy snow"
        if temperature < 25:
            return "Light snow"
        return "Snow flurries"

    if region in MID_REGIONS and temperature < 35:
        if temperature < 20:
            return "Snow showers"
        if temperature < 30:
            return "Light snow"
        return "Freezing rain"

    if temperature < 32:
        if temperature < 25:
            return "Unusual snowfall"
        return "Cold and cloudy"

    if temperature < 40:
        return "Cold and overcast"
    if temperature < 50:
        return "Chilly with rain"
    return "Cool and partly cloudy"


def synthesize_weather(region: Region, location: str, rng: Callable[[], float]) -> WeatherData:
    """
    Derive weather from the region and a random stream.

    Draws happen in a fixed order: temperature, snowfall (only below
    freezing), wind speed.
    """
    temperature = _round_half_up(base_temperature(region) + (rng() * 20 - 10))

    snowfall = 0.0
    if temperature < FREEZING_F:
        multiplier = 1.5 if region in NORTHERN_REGIONS else 1.0
        snowfall = _round_tenths(rng() * 8 * multiplier)

    wind_speed = _round_half_up(5 + rng() * 25)

    return WeatherData(
        temperature=temperature,
        snowfall=snowfall,
        wind_speed=wind_speed,
        conditions=describe_conditions(region, temperature),
        location=location,
    )


# -------------------------
# Probability scoring
# -------------------------

def _temperature_points(temperature: float) -> int:
    if temperature < 10:
        return 40
    elif temperature < 20:
        return 30
    elif temperature < 28:
        return 20
    elif temperature < 32:
        return 10
    return 0


def _snowfall_points(snowfall: float) -> int:
    if snowfall > 8:
        return 50
    elif snowfall > 5:
        return 40
    elif snowfall > 3:
        return 30
    elif snowfall > 1:
        return 20
    elif snowfall > 0:
        return 10
    return 0


def _wind_points(wind_speed: float) -> int:
    if wind_speed > 25:
        return 10
    elif wind_speed > 15:
        return 5
    return 0


def _conditions_points(conditions: str) -> int:
    text = conditions.lower()
    if 'heavy snow' in text or 'blizzard' in text:
        return 20
    elif 'snow' in text:
        return 15
    elif 'freezing' in text:
        return 10
    return 0


def probability_message(probability: int) -> str:
    for threshold, message in PROBABILITY_MESSAGES:
        if probability >= threshold:
            return message
    return DEFAULT_MESSAGE


def score_weather(weather: WeatherData) -> Score:
    probability = (
        _temperature_points(weather.temperature) +
        _snowfall_points(weather.snowfall) +
        _wind_points(weather.wind_speed) +
        _conditions_points(weather.conditions)
    )
    probability = min(probability, 100)
    return Score(probability=probability, message=probability_message(probability))


# -------------------------
# Calculator
# -------------------------

class SnowDayCalculator:
    """
    Snow day probability from a postal code.

    Every call is computed from scratch: a new generator is seeded from the
    input, so concurrent callers never share state.

    Args:
        latency: seconds to sleep before generating, to emulate a remote
            weather backend. Zero skips the sleep.
        logger: logger for failure diagnostics.
    """

    def __init__(self, latency: float = 0.0, logger: Optional[logging.Logger] = None):
        self.latency = latency
        self._log = logger or logging.getLogger(self.__class__.__name__)

    def get_weather(self, postal_code: str) -> WeatherData:
        """Synthesize weather, raising GenerationError with a generic message on any failure."""
        try:
            validate_postal_code(postal_code)

            if self.latency > 0:
                time.sleep(self.latency)

            rng = SeededRandom(seed_from_postal_code(postal_code))
            classification = classify_postal_code(postal_code)
            weather = synthesize_weather(classification.region, classification.location, rng)
        except Exception as exc:
            self._log.error("Error generating weather data for %r: %s", postal_code, exc, exc_info=exc)
            raise GenerationError(GENERATION_ERROR_MESSAGE) from exc

        self._log.debug("Generated weather for %s: %s", weather.location, weather)
        return weather

    def calculate_probability(self, postal_code: str) -> SnowDayResult:
        weather = self.get_weather(postal_code)
        score = score_weather(weather)

        return SnowDayResult(
            probability=score.probability,
            temperature=weather.temperature,
            snowfall=weather.snowfall,
            wind_speed=weather.wind_speed,
            conditions=weather.conditions,
            location=weather.location,
            message=score.message,
        )


def get_weather(postal_code: str, latency: float = 0.0) -> WeatherData:
    return SnowDayCalculator(latency=latency).get_weather(postal_code)


def calculate_probability(postal_code: str, latency: float = 0.0) -> SnowDayResult:
    """
    Get the snow day probability for a postal code.

    Args:
        postal_code: US ZIP code or Canadian postal code
        latency: simulated backend delay in seconds

    Returns:
        SnowDayResult with probability, weather and message
    """
    return SnowDayCalculator(latency=latency).calculate_probability(postal_code)
