from typing import List

from models.chart_models import ColorPair

GOLDEN_ANGLE = 137.50776


def _format_hue(hue: float) -> str:
    # whole degrees print without a fraction, anything else at full precision
    return str(int(hue)) if hue.is_integer() else repr(hue)


def generate_colors(count: int) -> List[ColorPair]:
    """
    Deterministic palette of `count` colors. Successive hues are one golden
    angle apart, so neighbouring points stay visually distinct for any count.
    """
    colors: List[ColorPair] = []
    for i in range(max(count, 0)):
        hue = _format_hue((i * GOLDEN_ANGLE) % 360)
        colors.append(
            ColorPair(
                background=f"hsla({hue}, 70%, 60%, 0.6)",
                border=f"hsla({hue}, 70%, 50%, 1)",
            )
        )
    return colors
