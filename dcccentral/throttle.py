"""Potentiometer throttle input and display text."""

from __future__ import annotations

from dataclasses import dataclass

from dcccentral.packets import MAX_SPEED_STEP

ADC_MAX = 4095
ADC_CENTER = 2048
DEAD_ZONE = 100


def _div_toward_zero(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


def map_range(value: int, in_min: int, in_max: int, out_min: int, out_max: int) -> int:
    """Linearly map ``value`` with integer arithmetic truncating toward zero."""
    return (
        _div_toward_zero((value - in_min) * (out_max - out_min), in_max - in_min)
        + out_min
    )


def poti_to_speed(value: int) -> int:
    """Map a raw potentiometer reading to a signed speed step with a centre dead zone."""
    if value > ADC_CENTER + DEAD_ZONE:
        return map_range(value, ADC_CENTER + DEAD_ZONE, ADC_MAX, 0, MAX_SPEED_STEP)
    if value < ADC_CENTER - DEAD_ZONE:
        return map_range(value, 0, ADC_CENTER - DEAD_ZONE, -MAX_SPEED_STEP, 0)
    return 0


@dataclass
class SpeedChangeDetector:
    """Reports when the mapped throttle speed differs from the last one seen."""

    last: int = 0
    current: int = 0

    def update(self, value: int) -> bool:
        """Feed a raw reading; return True when the mapped speed changed."""
        self.current = poti_to_speed(value)
        if self.current != self.last:
            self.last = self.current
            return True
        return False


def format_display(speed: int, address: int) -> str:
    """Return the display text showing the speed and the locomotive address."""
    return f"Geschw.: {speed}\n{address}\n"