"""Runtime configuration defaults for the backend, parking provider and UI."""

from __future__ import annotations

API_URL = "https://stregsystem.fklub.dk/api"
DEFAULT_ROOM_ID = 10

SETTINGS_APP_NAME = "stregsystem-tui"
SETTINGS_FILENAME = "settings.json"
LOG_FILENAME = "stregsystem-tui.log"
LOG_LEVEL_ENV = "STREGSYSTEM_TUI_LOG_LEVEL"

# Event loop cadence.
INPUT_POLL_INTERVAL_SECONDS = 0.1
CLOCK_TICK_SECONDS = 1.0
EVENT_QUEUE_SIZE = 100

MIN_TERMINAL_WIDTH = 120
MIN_TERMINAL_HEIGHT = 40

SEARCH_RESULT_LIMIT = 10
MIN_QUANTITY = 1
MAX_QUANTITY = 99

# Balance colouring thresholds, in øre.
BALANCE_HIGH_THRESHOLD = 5000
BALANCE_MID_THRESHOLD = 1000

# Values required by the mobile-parking.eu tablet endpoint.
PARKING_URL = "https://api.mobile-parking.eu/v10/permit/Tablet/confirm"
PARKING_DURATION_MINUTES = 600
PARKING_AREA_ID = 1956
PARKING_AREA_KEY = "ADK-4688"
PARKING_UID = "12cdf204-d969-469a-9bd5-c1f1fc59ee34"
PARKING_COUNTRY = "DK"
PARKING_PHONE_PREFIX = "45"
PARKING_LANG = "da"
PHONE_NUMBER_LENGTH = 8

VEHICLE_LOOKUP_URL = "https://www.nummerplade.net/nummerplade/{plate}.html"

MOBILEPAY_NUMBER = "90601"
QR_MIN_AMOUNT_ORE = 5000
