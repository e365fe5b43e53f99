"""Month-granular activation windows for dated financial items."""

UNBOUNDED_END_YEAR = 9999  # 종료일 미지정 = 9999년까지 유효


def month_index(year: int, month: int) -> int:
    """Linear month index used for all window comparisons."""
    return year * 12 + month


def window_bounds(item) -> tuple[int, int]:
    """Return (start, end) month indices of an item's activation window.

    Missing start → always started; missing end → active through 9999.
    A missing start/end month defaults to January/December.
    """
    start = month_index(item.start_year or 0, item.start_month or 1)
    if item.end_year:
        end = month_index(item.end_year, item.end_month or 12)
    else:
        end = month_index(UNBOUNDED_END_YEAR, 12)
    return start, end


def is_active_at(item, year: int, month: int) -> bool:
    """True if (year, month) lies inside the item's closed window."""
    start, end = window_bounds(item)
    return start <= month_index(year, month) <= end


def is_active_in_year(item, year: int) -> bool:
    """True if the item's window overlaps any month of the year.

    Interval overlap, not a single-month sample: an item active only in
    February still counts for that year.
    """
    start, end = window_bounds(item)
    return start <= month_index(year, 12) and end >= month_index(year, 1)


def is_single_month(item) -> bool:
    start, end = window_bounds(item)
    return start == end


def retirement_year_month(birth_year: int, birth_month: int, retirement_age: int) -> tuple[int, int]:
    """Last working month: the month before the birth month in the retirement year.

    Born in January → December of the previous year.
    """
    year = birth_year + retirement_age
    if birth_month <= 1:
        return year - 1, 12
    return year, birth_month - 1


def age_at(birth_year: int, birth_month: int, year: int, month: int) -> int:
    """Completed age in (year, month); the birthday counts from the birth month."""
    age = year - birth_year
    if month < (birth_month or 1):
        age -= 1
    return age
