from sct.core.history import Penalty


# Formats raw seconds the way every time in the app is shown, five decimal places. Negative values clamp to zero.
def format_seconds(seconds):
    return f"{max(0.0, seconds):.5f}"

# Formats a finalized solve for lists: DNF replaces the time entirely, +2 gets a suffix.
def format_solve(record):
    if record.penalty is Penalty.DNF:
        return "DNF"
    if record.penalty is Penalty.PLUS_TWO:
        return f"{format_seconds(record.time)} (+2)"
    return format_seconds(record.time)

# Suffix used to annotate a live display with its pending penalty.
def penalty_suffix(penalty):
    if penalty is Penalty.NONE:
        return ""
    return f" ({penalty.value})"
