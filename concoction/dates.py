"""Date normalisation and formatting for context ``date`` fields.

A raw ``date`` value comes in one of three shapes:

* a string (ISO 8601, RFC 2822 or a handful of common layouts),
* a number, taken as milliseconds since the epoch,
* a mapping of partial fields (``{"year": 2020, "month": "3", "day": 15}``).

``to_datetime`` turns any of them into a naive local ``datetime``;
``format_date`` renders one with a moment-style token pattern
(``"YYYY-MM-DD"``) or, when the pattern contains ``%``, with ``strftime``.
"""
import re
from dataclasses import dataclass
from datetime import date, datetime
from email.utils import parsedate_to_datetime
from typing import Any, Mapping, Optional, Union

from .config import DEFAULT_DATE_FORMAT
from .errors import InvalidDate

MONTHS = ("January", "February", "March", "April", "May", "June", "July",
          "August", "September", "October", "November", "December")
WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday",
            "Saturday", "Sunday")

_STRING_FORMATS = (
    "%Y-%m-%d",
    "%Y-%m",
    "%Y",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d",
    "%B %d, %Y %H:%M:%S",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
)

_SUFFIXES = {1: "st", 2: "nd", 3: "rd"}

_FIELD_ALIASES = {
    "year": ("year", "years", "y"),
    "month": ("month", "months", "M"),
    "day": ("day", "days", "date", "dates", "D"),
    "hour": ("hour", "hours", "h"),
    "minute": ("minute", "minutes", "m"),
    "second": ("second", "seconds", "s"),
    "millisecond": ("millisecond", "milliseconds", "ms"),
}


@dataclass(frozen=True)
class EpochMillis:
    value: float


@dataclass(frozen=True)
class PartialFields:
    year: Any = None
    month: Any = None
    day: Any = None
    hour: Any = None
    minute: Any = None
    second: Any = None
    millisecond: Any = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PartialFields":
        found = {}
        for name, aliases in _FIELD_ALIASES.items():
            for alias in aliases:
                if alias in data:
                    found[name] = data[alias]
                    break
        return cls(**found)


RawDate = Union[str, EpochMillis, PartialFields, datetime]


def classify(value: Any) -> RawDate:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, bool):
        raise TypeError(f"unsupported date value {value!r}")
    if isinstance(value, (int, float)):
        return EpochMillis(value)
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        return PartialFields.from_mapping(value)
    raise TypeError(f"unsupported date value {value!r}")


_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _calendar_month(value: Any) -> int:
    # integer-like months are 1-indexed calendar months, as datetime expects;
    # the leading integer counts, so "3.0" and "3rd" are March
    match = _LEADING_INT.match(str(value))
    if match:
        return int(match.group(1))
    name = str(value).strip().lower()
    for i, month in enumerate(MONTHS, start=1):
        if name and month.lower().startswith(name) and len(name) >= 3:
            return i
    raise ValueError(f"unknown month {value!r}")


def _int(value: Any) -> int:
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"not a whole number: {value!r}")
    return int(value)


def _from_fields(fields: PartialFields) -> datetime:
    """Build a datetime from partial fields.

    Missing year, month and day before the first given one come from the
    current date; the ones after it, and any missing time field, start at
    their lowest value.
    """
    now = datetime.now()
    given = [fields.year, fields.month, fields.day]
    first = next((i for i, v in enumerate(given) if v is not None), len(given))
    year = now.year if fields.year is None else _int(fields.year)
    if fields.month is not None:
        month = _calendar_month(fields.month)
    else:
        month = now.month if first > 1 else 1
    if fields.day is not None:
        day = _int(fields.day)
    else:
        day = now.day if first > 2 else 1
    return datetime(
        year,
        month,
        day,
        _int(fields.hour or 0),
        _int(fields.minute or 0),
        _int(fields.second or 0),
        _int(fields.millisecond or 0) * 1000,
    )


def _local(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt
    return dt.astimezone().replace(tzinfo=None)


def _from_string(text: str) -> datetime:
    text = text.strip()
    iso = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        return _local(datetime.fromisoformat(iso))
    except ValueError:
        pass
    for fmt in _STRING_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    try:
        return _local(parsedate_to_datetime(text))
    except (TypeError, ValueError, IndexError):
        raise ValueError(f"unrecognised date string {text!r}") from None


def to_datetime(raw: RawDate) -> datetime:
    if isinstance(raw, datetime):
        return _local(raw)
    if isinstance(raw, EpochMillis):
        return datetime.fromtimestamp(raw.value / 1000)
    if isinstance(raw, PartialFields):
        return _from_fields(raw)
    return _from_string(raw)


def parse_date(value: Any, source: str) -> datetime:
    """Normalise ``value`` or raise InvalidDate naming ``source``."""
    if value is None:
        raise InvalidDate(source, value)
    try:
        return to_datetime(classify(value))
    except (TypeError, ValueError, OverflowError, OSError) as exc:
        raise InvalidDate(source, value) from exc


def _ordinal(n: int) -> str:
    suffix = "th" if 10 <= n % 100 <= 20 else _SUFFIXES.get(n % 10, "th")
    return f"{n}{suffix}"


def _offset(dt: datetime, sep: str) -> str:
    z = dt.astimezone().strftime("%z") if dt.tzinfo is None else dt.strftime("%z")
    return f"{z[:3]}{sep}{z[3:]}"


def _hour12(dt: datetime) -> int:
    return dt.hour % 12 or 12


_TOKENS = {
    "YYYY": lambda d: f"{d.year:04d}",
    "YY": lambda d: f"{d.year % 100:02d}",
    "MMMM": lambda d: MONTHS[d.month - 1],
    "MMM": lambda d: MONTHS[d.month - 1][:3],
    "MM": lambda d: f"{d.month:02d}",
    "Mo": lambda d: _ordinal(d.month),
    "M": lambda d: str(d.month),
    "DDDD": lambda d: f"{d.timetuple().tm_yday:03d}",
    "DDD": lambda d: str(d.timetuple().tm_yday),
    "Do": lambda d: _ordinal(d.day),
    "DD": lambda d: f"{d.day:02d}",
    "D": lambda d: str(d.day),
    "dddd": lambda d: WEEKDAYS[d.weekday()],
    "ddd": lambda d: WEEKDAYS[d.weekday()][:3],
    "dd": lambda d: WEEKDAYS[d.weekday()][:2],
    "d": lambda d: str((d.weekday() + 1) % 7),
    "HH": lambda d: f"{d.hour:02d}",
    "H": lambda d: str(d.hour),
    "hh": lambda d: f"{_hour12(d):02d}",
    "h": lambda d: str(_hour12(d)),
    "mm": lambda d: f"{d.minute:02d}",
    "m": lambda d: str(d.minute),
    "ss": lambda d: f"{d.second:02d}",
    "s": lambda d: str(d.second),
    "SSS": lambda d: f"{d.microsecond // 1000:03d}",
    "A": lambda d: "AM" if d.hour < 12 else "PM",
    "a": lambda d: "am" if d.hour < 12 else "pm",
    "ZZ": lambda d: _offset(d, ""),
    "Z": lambda d: _offset(d, ":"),
}

# longest tokens first so "MMMM" wins over "MM"
_TOKEN_RE = re.compile(
    r"\[[^\]]*\]|" + "|".join(sorted(_TOKENS, key=len, reverse=True))
)


def format_date(dt: datetime, pattern: Optional[str] = None) -> str:
    pattern = pattern or DEFAULT_DATE_FORMAT
    if "%" in pattern:
        return dt.strftime(pattern)

    def repl(match: "re.Match[str]") -> str:
        token = match.group(0)
        if token.startswith("["):
            return token[1:-1]
        return _TOKENS[token](dt)

    return _TOKEN_RE.sub(repl, pattern)
