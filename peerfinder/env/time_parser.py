import re
from datetime import timedelta


class TimeParser:
    def __init__(self) -> None:
        self._units = {
            "s": "seconds",
            "m": "minutes",
            "h": "hours",
            "d": "days",
            "w": "weeks",
        }
        self._pattern = re.compile(
            r"(?P<val>\d+(\.\d+)?)(?P<unit>[smhdw]?)",
            flags=re.I,
        )
        self._duration = re.compile(
            r"(\d+(\.\d+)?[smhdw])*(\d+(\.\d+)?)?",
            flags=re.I,
        )

    def parse(self, time_amount: str) -> float:
        duration = time_amount.strip()
        if self._duration.fullmatch(duration) is None:
            raise ValueError(f"Err. - could not parse duration '{time_amount}'")

        amounts: dict[str, float] = {}

        for match in self._pattern.finditer(duration):
            unit = self._units.get(match.group("unit").lower(), "seconds")
            amounts[unit] = amounts.get(unit, 0.0) + float(match.group("val"))

        if not amounts:
            raise ValueError(f"Err. - could not parse duration '{time_amount}'")

        return timedelta(**amounts).total_seconds()
