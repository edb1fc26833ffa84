"""Unit tables for the metrics that leave a fetcher.

Every unit belongs to one dimension and carries a factor relative to that
dimension's base unit. Conversion is linear: value * from_factor / to_factor.
"""

from aihealth.core.exceptions import UnitConversionError

# Canonical units used in the snapshot
BPM = "count/min"
MILLISECONDS = "ms"
MINUTES = "min"
HOURS = "hr"
KILOCALORIES = "kcal"
KILOGRAMS = "kg"
PERCENT = "%"
COUNT = "count"
VO2_MAX = "mL/(kg*min)"

# unit -> (dimension, factor to the dimension's base unit)
UNIT_TABLE: dict[str, tuple[str, float]] = {
    # time, base: second
    "ms": ("time", 0.001),
    "s": ("time", 1.0),
    "min": ("time", 60.0),
    "hr": ("time", 3600.0),
    # rate, base: count per minute
    "count/min": ("rate", 1.0),
    "count/s": ("rate", 60.0),
    # energy, base: kilocalorie
    "kcal": ("energy", 1.0),
    "cal": ("energy", 0.001),
    "kj": ("energy", 1 / 4.184),
    # mass, base: kilogram
    "kg": ("mass", 1.0),
    "g": ("mass", 0.001),
    "lb": ("mass", 0.45359237),
    "st": ("mass", 6.35029318),
    # ratio, base: percent (0-100)
    "%": ("ratio", 1.0),
    "fraction": ("ratio", 100.0),
    # count
    "count": ("count", 1.0),
    # oxygen uptake, base: mL/(kg*min)
    "ml/(kg*min)": ("vo2", 1.0),
    "l/(kg*min)": ("vo2", 1000.0),
}

# Spellings seen in exports, mapped onto UNIT_TABLE keys
UNIT_ALIASES = {
    "bpm": "count/min",
    "breaths/min": "count/min",
    "sec": "s",
    "seconds": "s",
    "minutes": "min",
    "h": "hr",
    "hours": "hr",
    "kilocalories": "kcal",
    "lbs": "lb",
    "pound": "lb",
    "pounds": "lb",
    "percent": "%",
    "ml/(kg·min)": "ml/(kg*min)",
    "ml/kg/min": "ml/(kg*min)",
    "ml/kg·min": "ml/(kg*min)",
    "steps": "count",
}

# Spellings whose case carries meaning, checked before lowercasing.
# A capital "Cal" is the food Calorie, i.e. one kilocalorie.
CASE_SENSITIVE_ALIASES = {
    "Cal": "kcal",
    "Cals": "kcal",
}


def normalize_unit(unit: str) -> str:
    """Return the UNIT_TABLE key for a unit spelling."""
    key = (unit or "").strip()
    if key in CASE_SENSITIVE_ALIASES:
        return CASE_SENSITIVE_ALIASES[key]
    key = key.lower()
    key = UNIT_ALIASES.get(key, key)
    if key not in UNIT_TABLE:
        raise UnitConversionError(unit, unit)
    return key


def convert(value: float, from_unit: str, to_unit: str) -> float:
    """Convert a value between two units of the same dimension.

    Raises:
        UnitConversionError: Unknown unit or mismatched dimensions.
    """
    try:
        source = normalize_unit(from_unit)
        target = normalize_unit(to_unit)
    except UnitConversionError:
        raise UnitConversionError(from_unit, to_unit) from None

    source_dim, source_factor = UNIT_TABLE[source]
    target_dim, target_factor = UNIT_TABLE[target]
    if source_dim != target_dim:
        raise UnitConversionError(from_unit, to_unit)
    if source == target:
        return value
    return value * source_factor / target_factor
