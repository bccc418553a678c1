"""
Time Utilities
==============

Formatting of propagation durations for console output.
"""
from n_body_high_fidelity.model.constants import CONVERTER


def format_time_offset(
  seconds : float,
) -> str:
  """
  Format a signed time offset as days, hours, minutes and seconds.

  Examples:
    12345.678 -> "+0d 03h 25m 45.678s"
   -98765.432 -> "-1d 03h 26m 05.432s"

  Input:
  ------
    seconds : float
      Time offset [s]. Backward propagations give negative offsets.

  Output:
  -------
    offset_str : str
  """
  sign           = '-' if seconds < 0 else '+'
  days, rem_sec  = divmod(abs(seconds), CONVERTER.SEC_PER_DAY)
  hours, rem_sec = divmod(rem_sec, CONVERTER.SEC_PER_HOUR)
  minutes, secs  = divmod(rem_sec, 60.0)

  return f"{sign}{int(days)}d {int(hours):02d}h {int(minutes):02d}m {secs:06.3f}s"
