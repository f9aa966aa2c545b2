from collections.abc import Iterable
import math


def convert_kwargs_to_cmd_line_args(kwargs):
    """Helper function to build command line arguments out of dict."""
    args = []
    for k in sorted(kwargs.keys()):
        v = kwargs[k]
        if isinstance(v, Iterable) and not isinstance(v, str):
            for value in v:
                args.append('-{}'.format(k))
                if value is not None:
                    args.append('{}'.format(value))
            continue
        args.append('-{}'.format(k))
        if v is not None:
            args.append('{}'.format(v))
    return args


def round_half_up(value):
    """Round to the nearest integer, with halves going away from zero (unlike ``round()``)."""
    if value < 0:
        return -int(math.floor(-value + 0.5))
    return int(math.floor(value + 0.5))


def parse_rate(rate):
    """Parse an ffprobe rational such as ``'30000/1001'`` into a float.

    Returns ``None`` for missing or degenerate (``'0/0'``) rates.
    """
    if not rate:
        return None
    num, _, den = str(rate).partition('/')
    try:
        num = float(num)
        den = float(den) if den else 1.0
    except ValueError:
        return None
    if num <= 0 or den <= 0:
        return None
    return num / den
