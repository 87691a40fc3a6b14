from functools import wraps

from flask import current_app, g, jsonify, request
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

TOKEN_SALT = "admin-token"


def _serializer(secret_key=None):
    return URLSafeTimedSerializer(secret_key or current_app.config["SECRET_KEY"], salt=TOKEN_SALT)


def issue_token(nome, secret_key=None):
    """Gera o token bearer de um administrador."""
    return _serializer(secret_key).dumps({"nome": nome})


def bearer_token(req):
    auth_header = req.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return None
    return auth_header[7:].strip() or None


def token_authorizer(req):
    """Autorizador padrão: devolve o nome do administrador ou None."""
    token = bearer_token(req)
    if token is None:
        return None
    try:
        payload = _serializer().loads(token, max_age=current_app.config["TOKEN_MAX_AGE"])
    except SignatureExpired:
        current_app.logger.info("Token de administrador expirado")
        return None
    except BadSignature:
        current_app.logger.warning("Token de administrador inválido")
        return None
    return payload.get("nome") if isinstance(payload, dict) else None


def get_authorizer():
    return current_app.config.get("AUTHORIZER") or token_authorizer


def require_admin(view):
    """Exige um chamador autorizado; o nome dele fica em g.actor para os logs de status."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        actor = get_authorizer()(request)
        if not actor:
            return jsonify({"error": "nao_autorizado", "message": "Token de acesso ausente ou inválido"}), 401
        g.actor = actor
        return view(*args, **kwargs)

    return wrapper
