import spiceypy as spice

from datetime import datetime

from n_body_high_fidelity.errors          import KernelsNotLoadedError
from n_body_high_fidelity.model.ephemeris import spice_kernels_loaded


def _require_kernels() -> None:
  if not spice_kernels_loaded():
    raise KernelsNotLoadedError(
      "Time conversion needs the leap seconds kernel. Call load_spice_kernels() first."
    )


def epoch_to_et(
  epoch_str : str,
) -> float:
  """
  Convert an epoch string to Ephemeris Time (ET) (seconds past J2000).

  Input:
  ------
    epoch_str : str
      Any string SPICE `str2et` accepts, including a time system suffix,
      e.g. '2019-01-01T12:00:00 TDB' or '2023-07-01T00:00:00 UTC'.
      Strings without a suffix are read as UTC.

  Output:
  -------
    et_float : float
      Ephemeris Time (ET) in seconds past J2000.
  """
  _require_kernels()
  return float(spice.str2et(epoch_str))


def utc_to_et(
  utc_dt : datetime,
) -> float:
  """
  Convert a UTC datetime object to Ephemeris Time (ET) (seconds past J2000).
  
  Input:
  ------
    utc_dt : datetime
      The UTC datetime to convert.
  
  Output:
  -------
    et_float : float
      The corresponding Ephemeris Time (ET) in seconds past J2000.
  """
  return epoch_to_et(utc_dt.strftime('%Y-%m-%dT%H:%M:%S.%f') + ' UTC')


def et_to_utc(
  et                : float,
  precision_seconds : int = 0,
) -> datetime:
  """
  Convert Ephemeris Time (ET) to UTC datetime object.
  
  Input:
  ------
    et : float
      Ephemeris Time (ET) in seconds past J2000.
    precision_seconds : int
      Number of decimal places for the seconds component (0-6).
  
  Output:
  -------
    utc_dt : datetime
      UTC time as a datetime object.
  """
  _require_kernels()

  # Ensure precision doesn't exceed 6 for datetime compatibility
  if precision_seconds > 6:
    precision_seconds = 6

  # 'ISOC' specifies the output format as ISO Calendar (YYYY-MM-DDThh:mm:ss.sss)
  utc_str = str(spice.et2utc(et, 'ISOC', precision_seconds))

  return datetime.fromisoformat(utc_str)
