import calendar
from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class PeriodWindow:
    start: date
    end: date  # exclusive

    def contains(self, day: date) -> bool:
        return self.start <= day < self.end


def _anchor(year: int, month: int, anchor_day: int) -> date:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(anchor_day, last_day))


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def calendar_window(as_of: date) -> PeriodWindow:
    start = as_of.replace(day=1)
    year, month = _shift_month(as_of.year, as_of.month, 1)
    return PeriodWindow(start=start, end=date(year, month, 1))


def statement_window(as_of: date, anchor_day: int) -> PeriodWindow:
    if not 1 <= anchor_day <= 31:
        raise ValueError(f"statement anchor day must be 1-31, got {anchor_day}")

    year, month = as_of.year, as_of.month
    if as_of < _anchor(year, month, anchor_day):
        year, month = _shift_month(year, month, -1)

    next_year, next_month = _shift_month(year, month, 1)
    return PeriodWindow(
        start=_anchor(year, month, anchor_day),
        end=_anchor(next_year, next_month, anchor_day),
    )


def period_window(period_type: str, as_of: date, anchor_day: int = 1) -> PeriodWindow:
    if period_type == "statement":
        return statement_window(as_of, anchor_day)
    return calendar_window(as_of)
