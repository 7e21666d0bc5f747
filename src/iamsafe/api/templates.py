import os
from datetime import datetime

from fastapi.templating import Jinja2Templates

# src/iamsafe/api/templates.py -> src/iamsafe/templates
TEMPLATE_DIR = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "templates"
)


def format_timestamp(value: datetime | None) -> str:
    if value is None:
        return ""
    return value.strftime("%Y-%m-%d %H:%M:%S %Z")


templates = Jinja2Templates(directory=TEMPLATE_DIR)
templates.env.filters["timestamp"] = format_timestamp
