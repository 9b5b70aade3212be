"""Configuration for the inventory report generator."""
import os

from dotenv import load_dotenv

from models import Branding

load_dotenv()


def clean_env_value(value):
    """Strip whitespace and surrounding quotes from an environment value."""
    if not value:
        return ""
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        value = value[1:-1]
    return value.strip()


# Printed at the top of both artifacts
ORG_NAME = clean_env_value(os.getenv("REPORT_ORG_NAME")) or "Tusuka Trousers Ltd."
ORG_ADDRESS = clean_env_value(os.getenv("REPORT_ORG_ADDRESS")) or "Neelngar, Konabari, Gazipur"
REPORT_TITLE = clean_env_value(os.getenv("REPORT_TITLE")) or "Inventory Report"

# Where the CLI saves generated files
OUTPUT_DIR = clean_env_value(os.getenv("REPORT_OUTPUT_DIR")) or "output"

LOG_LEVEL = (clean_env_value(os.getenv("LOG_LEVEL")) or "INFO").upper()

DEFAULT_BRANDING = Branding(
    org_name=ORG_NAME,
    org_address=ORG_ADDRESS,
    title=REPORT_TITLE,
)
