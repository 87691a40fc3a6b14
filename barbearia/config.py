import os

from dotenv import load_dotenv

load_dotenv()


def _database_url():
    url = os.getenv("DATABASE_URL")
    if url:
        # Provedores como Heroku/Render ainda entregam o prefixo antigo
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)
        return url
    return (
        f"mysql+pymysql://{os.getenv('DB_USERNAME', 'root')}:{os.getenv('DB_PASSWORD', 'password')}"
        f"@{os.getenv('DB_HOST', 'localhost')}:{os.getenv('DB_PORT', '3306')}/{os.getenv('DB_NAME', 'barbearia')}"
    )


def engine_options(database_url, timeout):
    """Opções do engine com timeouts limitados, para que nenhuma chamada ao banco fique presa."""
    if database_url.startswith("sqlite"):
        return {}

    options = {
        "pool_pre_ping": True,
        "pool_recycle": 300,
        "pool_timeout": timeout,
    }
    if database_url.startswith("mysql+pymysql"):
        options["connect_args"] = {
            "connect_timeout": timeout,
            "read_timeout": timeout,
            "write_timeout": timeout,
        }
    elif database_url.startswith("postgresql"):
        options["connect_args"] = {"connect_timeout": timeout}
    return options


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "troque-esta-chave")

    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    DB_TIMEOUT = int(os.getenv("DB_TIMEOUT", "5"))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    TIMEZONE = os.getenv("TIMEZONE", "America/Sao_Paulo")

    # Autenticação do painel administrativo
    TOKEN_MAX_AGE = int(os.getenv("TOKEN_MAX_AGE", str(12 * 60 * 60)))
    AUTHORIZER = None  # None = token assinado (barbearia.auth.token_authorizer)

    # Horário de funcionamento
    HORARIO_ABERTURA = os.getenv("HORARIO_ABERTURA", "09:00")
    HORARIO_FECHAMENTO = os.getenv("HORARIO_FECHAMENTO", "19:00")
    INTERVALO_MINUTOS = int(os.getenv("INTERVALO_MINUTOS", "60"))
    PAUSA_INICIO = os.getenv("PAUSA_INICIO", "12:00") or None
    PAUSA_FIM = os.getenv("PAUSA_FIM", "13:00") or None
