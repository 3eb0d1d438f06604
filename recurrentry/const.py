# File: const.py
"""Constants for the recurrentry package.

This file centralizes period names, ordinal vocabularies, weekday numbering,
safety limits and defaults so that engines, builders and the generator share
one definition of each value.
"""

import logging

# ------------------------------------------------------------------------------------------------
# General / Package Information
# ------------------------------------------------------------------------------------------------
# Logger
LOGGER = logging.getLogger(__package__)

# ------------------------------------------------------------------------------------------------
# Periods
# ------------------------------------------------------------------------------------------------
PERIOD_NONE = "none"
PERIOD_WEEK = "week"
PERIOD_MONTH = "month"
PERIOD_YEAR = "year"

PERIOD_OPTIONS = [
    PERIOD_NONE,
    PERIOD_WEEK,
    PERIOD_MONTH,
    PERIOD_YEAR,
]

# Maximum number of cycles generated per period. These only bound
# pathological inputs (e.g. an accidental interval of 10_000).
MAX_INTERVALS: dict[str, int] = {
    PERIOD_YEAR: 20,
    PERIOD_MONTH: 240,
    PERIOD_WEEK: 1248,
}

# ------------------------------------------------------------------------------------------------
# Weekdays (ISO 8601 numbering: Monday=1 ... Sunday=7)
# ------------------------------------------------------------------------------------------------
ISO_MONDAY = 1
ISO_TUESDAY = 2
ISO_WEDNESDAY = 3
ISO_THURSDAY = 4
ISO_FRIDAY = 5
ISO_SATURDAY = 6
ISO_SUNDAY = 7

DAYS_PER_WEEK = 7

DAY_OF_WEEK_MONDAY = "monday"
DAY_OF_WEEK_TUESDAY = "tuesday"
DAY_OF_WEEK_WEDNESDAY = "wednesday"
DAY_OF_WEEK_THURSDAY = "thursday"
DAY_OF_WEEK_FRIDAY = "friday"
DAY_OF_WEEK_SATURDAY = "saturday"
DAY_OF_WEEK_SUNDAY = "sunday"

# Day name -> ISO weekday number
DAY_OF_WEEK_NUMBERS: dict[str, int] = {
    DAY_OF_WEEK_MONDAY: ISO_MONDAY,
    DAY_OF_WEEK_TUESDAY: ISO_TUESDAY,
    DAY_OF_WEEK_WEDNESDAY: ISO_WEDNESDAY,
    DAY_OF_WEEK_THURSDAY: ISO_THURSDAY,
    DAY_OF_WEEK_FRIDAY: ISO_FRIDAY,
    DAY_OF_WEEK_SATURDAY: ISO_SATURDAY,
    DAY_OF_WEEK_SUNDAY: ISO_SUNDAY,
}

# Common weekend definition (not applied implicitly; callers pass weekend days)
WEEKEND_DAYS_SATURDAY_SUNDAY = frozenset({ISO_SATURDAY, ISO_SUNDAY})

# ------------------------------------------------------------------------------------------------
# Day Categories
# ------------------------------------------------------------------------------------------------
DAY_CATEGORY_DAY = "day"
DAY_CATEGORY_WEEKDAY = "weekday"
DAY_CATEGORY_WEEKEND = "weekend"

DAY_CATEGORY_OPTIONS = [
    DAY_CATEGORY_DAY,
    DAY_CATEGORY_WEEKDAY,
    DAY_CATEGORY_WEEKEND,
]

# Categories that can only be evaluated with a non-empty weekend-day set
DAY_CATEGORIES_REQUIRING_WEEKEND = {DAY_CATEGORY_WEEKDAY, DAY_CATEGORY_WEEKEND}

# ------------------------------------------------------------------------------------------------
# Ordinal Positions
# ------------------------------------------------------------------------------------------------
ORDINAL_FIRST = "first"
ORDINAL_SECOND = "second"
ORDINAL_THIRD = "third"
ORDINAL_FOURTH = "fourth"
ORDINAL_FIFTH = "fifth"
ORDINAL_NEXT_TO_LAST = "nextToLast"
ORDINAL_LAST = "last"

ORDINAL_POSITION_OPTIONS = [
    ORDINAL_FIRST,
    ORDINAL_SECOND,
    ORDINAL_THIRD,
    ORDINAL_FOURTH,
    ORDINAL_FIFTH,
    ORDINAL_NEXT_TO_LAST,
    ORDINAL_LAST,
]

# "{position}-{dayType}", e.g. "first-monday", "last-weekday"
ORDINAL_SEPARATOR = "-"

# ------------------------------------------------------------------------------------------------
# "each" Selector Ranges (inclusive)
# ------------------------------------------------------------------------------------------------
EACH_RANGES: dict[str, tuple[int, int]] = {
    PERIOD_WEEK: (ISO_MONDAY, ISO_SUNDAY),
    PERIOD_MONTH: (1, 31),
    PERIOD_YEAR: (1, 12),
}

# ------------------------------------------------------------------------------------------------
# Defaults
# ------------------------------------------------------------------------------------------------
DEFAULT_EVERY = 1
DEFAULT_GRACE_PERIOD = 0
DEFAULT_WORKDAYS_ONLY = False
DEFAULT_OCCURRENCE_INDEX = 1

# Upper bound for the workday walk in the payment date resolver. A full year
# covers any realistic run of weekends and holidays.
MAX_WORKDAY_ADJUSTMENT_ITERATIONS = 366

# ------------------------------------------------------------------------------------------------
# Input Data Keys (mapping-based builders)
# ------------------------------------------------------------------------------------------------
DATA_ITEM_ID = "id"
DATA_ITEM_DATE = "date"
DATA_ITEM_CONFIG = "config"

DATA_CONFIG_START = "start"
DATA_CONFIG_PERIOD = "period"
DATA_CONFIG_INTERVAL = "interval"
DATA_CONFIG_OPTIONS = "options"

DATA_OPTION_EVERY = "every"
DATA_OPTION_EACH = "each"
DATA_OPTION_ON = "on"
DATA_OPTION_WORKDAYS_ONLY = "workdaysOnly"
DATA_OPTION_GRACE_PERIOD = "gracePeriod"

DATA_MODIFICATION_ITEM_ID = "itemId"
DATA_MODIFICATION_INDEX = "index"
DATA_MODIFICATION_PAYLOAD = "payload"
DATA_MODIFICATION_REST_PAYLOAD = "restPayload"

# Reserved payload keys; every other key is a caller-defined field
DATA_PAYLOAD_DELETED = "deleted"
DATA_PAYLOAD_DATE = "date"

DATA_RANGE_START = "start"
DATA_RANGE_END = "end"

# ------------------------------------------------------------------------------------------------
# Validation Error Fields
# ------------------------------------------------------------------------------------------------
FIELD_ID = "id"
FIELD_DATE = "date"
FIELD_CONFIG = "config"
FIELD_PERIOD = "config.period"
FIELD_START = "config.start"
FIELD_INTERVAL = "config.interval"
FIELD_EVERY = "config.options.every"
FIELD_EACH = "config.options.each"
FIELD_ON = "config.options.on"
FIELD_GRACE_PERIOD = "config.options.gracePeriod"
FIELD_WEEKEND_DAYS = "weekendDays"
FIELD_HOLIDAYS = "holidays"
FIELD_MAX_INTERVALS = "maxIntervals"
FIELD_RANGE = "range"
FIELD_PAYLOAD_DATE = "payload.date"
FIELD_REST_PAYLOAD_DATE = "restPayload.date"
