import secrets

from authors_api.core.config import get_settings


def generate_activation_token(length: int | None = None) -> str:
    """Random lower-case hex token for a pending account."""
    if length is None:
        length = get_settings().ACTIVATION_TOKEN_LENGTH
    return secrets.token_hex((length + 1) // 2)[:length]
