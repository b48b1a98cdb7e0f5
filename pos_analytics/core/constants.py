UNCATEGORIZED = "Uncategorized"

WEEKDAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

MONTH_ABBREVIATIONS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)

PERIOD_OPTIONS = (
    "last7days",
    "last30days",
    "thisMonth",
    "lastMonth",
    "thisYear",
    "lastYear",
    "custom",
)

DAYS_PER_YEAR = 365
SECONDS_PER_DAY = 60 * 60 * 24

GLOBAL_SETTINGS_TYPE = "global"

UNCATEGORIZED_ID = "uncategorized"

URGENCY_CRITICAL = "Critical"
URGENCY_HIGH = "High"
URGENCY_MEDIUM = "Medium"
URGENCY_FILTERS = {
    "critical": URGENCY_CRITICAL,
    "high": URGENCY_HIGH,
    "medium": URGENCY_MEDIUM,
}
