def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def clamp_scores(scores: dict, bounds: dict[str, tuple[int, int]]) -> dict:
    """Clamp every bounded integer score into its documented display range."""
    clamped = dict(scores)
    for key, (low, high) in bounds.items():
        if key in clamped and not isinstance(clamped[key], bool):
            clamped[key] = int(clamp(int(clamped[key]), low, high))
    return clamped


def count_filled(*values) -> int:
    return sum(1 for value in values if value)


def round_half_up(value: float) -> int:
    # Half-up rounding so x.5 averages land on the higher integer.
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)
