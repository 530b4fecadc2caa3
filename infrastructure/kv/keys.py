"""Key layout for everything the gateway keeps in Redis."""

MAINTENANCE_KEY = "maintenance"


def otp_key(email: str) -> str:
    return f"otp:{email}"


def sends_key(email: str, day: str) -> str:
    return f"sends:{email}:{day}"


def block_key(email: str) -> str:
    return f"block:{email}"


def document_key(subject: str) -> str:
    return f"data:{subject}"
