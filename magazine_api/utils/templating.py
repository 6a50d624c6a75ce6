from pathlib import Path

from fastapi.templating import Jinja2Templates

from .config import APP_NAME

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals["app_name"] = APP_NAME
