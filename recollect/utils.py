from datetime import UTC, datetime


def truncate(value: str, max_len: int) -> str:
    if len(value) <= max_len:
        return value
    return value[: max_len - 3] + "..."


def utc_now() -> datetime:
    return datetime.now(UTC)


def clamp_score(value: float) -> float:
    return min(max(float(value), 0.0), 1.0)
