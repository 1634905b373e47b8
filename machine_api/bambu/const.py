"""Constants for Bambu Lab printers."""

from logging import Logger, getLogger

from machine_api.network_printer.announcement import AnnouncementFormat

LOGGER: Logger = getLogger(__package__)

# Discovery. Port 2021 is not a standard SSDP port, but it is where the
# printers send their NOTIFY frames.
DISCOVERY_PORT = 2021
NOTIFY_HEADER = "NOTIFY * HTTP/1.1"
BAMBU_URN = "urn:bambulab-com:device:3dprinter:1"

TOKEN_LOCATION = "Location"
TOKEN_MODEL = "DevModel.bambu.com"
TOKEN_NAME = "DevName.bambu.com"
TOKEN_SERIAL = "USN"
TOKEN_URN = "NT"

BAMBU_ANNOUNCEMENT = AnnouncementFormat(
    header=NOTIFY_HEADER,
    urn=BAMBU_URN,
    location_token=TOKEN_LOCATION,
    urn_token=TOKEN_URN,
    serial_token=TOKEN_SERIAL,
    model_token=TOKEN_MODEL,
    name_token=TOKEN_NAME,
)

UNKNOWN_MODEL_CODE = "Unknown"

# MQTT
MQTT_PORT = 8883
MQTT_USERNAME = "bblp"
MQTT_KEEPALIVE = 60
TOPIC_REPORT = "device/{serial}/report"
TOPIC_REQUEST = "device/{serial}/request"
COMMAND_TIMEOUT = 10

# FTPS
FTPS_PORT = 990
FTPS_USERNAME = "bblp"
FTPS_TIMEOUT = 30

# Print job
DEFAULT_PLATE_GCODE = "Metadata/plate_1.gcode"
PRINTER_FILE_URL = "file:///sdcard/{filename}"
