"""Key layout of the plant health records in the key-value store."""

CURRENT_USER_KEY = "current-user"


def user_key(email: str) -> str:
    return f"user:{email}"


def usage_key(email: str) -> str:
    return f"usage:{email}"


def plant_prefix(email: str) -> str:
    return f"plant:{email}:"


def plant_key(email: str, plant_id: int) -> str:
    return f"{plant_prefix(email)}{plant_id}"
