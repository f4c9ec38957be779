import secrets

API_KEY_PREFIX = "sk_"
SHARE_TOKEN_PREFIX = "share_"

# 32 random bytes -> 64 hex chars, 256 bits of entropy
TOKEN_BYTES = 32


def generate_api_key() -> str:
    return f"{API_KEY_PREFIX}{secrets.token_hex(TOKEN_BYTES)}"


def generate_share_token() -> str:
    return f"{SHARE_TOKEN_PREFIX}{secrets.token_hex(TOKEN_BYTES)}"


def is_share_token(value: str | None) -> bool:
    return bool(value) and value.startswith(SHARE_TOKEN_PREFIX)
