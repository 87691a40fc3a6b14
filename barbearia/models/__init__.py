from datetime import datetime

import pytz
from flask import current_app, has_app_context
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

DEFAULT_TIMEZONE = "America/Sao_Paulo"


def local_now():
    """Horário local da barbearia, sem tzinfo (as colunas DateTime são naive)."""
    tz_name = current_app.config.get("TIMEZONE", DEFAULT_TIMEZONE) if has_app_context() else DEFAULT_TIMEZONE
    return datetime.now(pytz.timezone(tz_name)).replace(tzinfo=None)
