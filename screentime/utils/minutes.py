"""
Minute formatting for the whole project.

Usage:
    from screentime.utils.minutes import format_minutes

    format_minutes(90)    -> "1:30"
    format_minutes(9)     -> "0:09"
    format_minutes(-20)   -> "-0:20"
"""


def format_minutes(minutes: int) -> str:
    """
    Format a signed number of minutes as "h:mm".

    Hours are not zero-padded; minutes always have two digits. A negative
    value (overspent balance) gets a leading minus sign.
    """
    sign = "-" if minutes < 0 else ""
    hours, rest = divmod(abs(minutes), 60)
    return f"{sign}{hours}:{rest:02d}"
