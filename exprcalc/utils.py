import enum


class PrintableEnum(enum.Enum):
    def __str__(self) -> str:
        return self.name

    __repr__ = __str__


def point_at(code: str, idx: int, window: int = 10) -> list[str]:
    """Two lines: a slice of ``code`` around ``idx`` and a caret under it"""
    idx = max(0, min(idx, len(code)))
    start_idx = max(0, idx - window)
    ellipsis_pre = start_idx > 0
    end_idx = min(len(code), idx + window)
    ellipsis_post = end_idx < len(code)
    return [
        ("..." if ellipsis_pre else "") + code[start_idx:end_idx] + ("..." if ellipsis_post else ""),
        " " * (idx - start_idx + (3 if ellipsis_pre else 0)) + "^",
    ]
