"""
Random sampling helpers. Everything here draws from the OS CSPRNG.
"""

import secrets


def int_sample(upper: int, lower: int = 1) -> int:
    """
    Uniform integer in [lower, upper). Used for EC scalars so the default
    lower bound skips zero.
    """
    if upper <= lower:
        raise ValueError(f"empty range [{lower}, {upper})")
    return lower + secrets.randbelow(upper - lower)


def sample_below(upper: int) -> int:
    return secrets.randbelow(upper)


def sample_range(lower: int, upper: int) -> int:
    return int_sample(upper, lower)
