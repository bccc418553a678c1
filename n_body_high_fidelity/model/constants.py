class CONVERTER:
  # Time Conversions
  SEC_PER_DAY  = 86400.0                   # [seconds] per [day]
  SEC_PER_HOUR = 3600.0                    # [seconds] per [hour]

  # Distance Conversions
  KM_PER_AU = 149597870.7                  # [kilometers] per [astronomical unit]


class SCALEFACTORS:
  """
  Default non-dimensionalization factors.
  """
  LENGTH = 1.0e6  # [km]
  TIME   = 1.0e6  # [s]
  MASS   = 1.0    # [kg], reserved


class NAIFIDS:
  """
  NAIF ID codes for celestial bodies used by SPICE.
  Reference: https://naif.jpl.nasa.gov/pub/naif/toolkit_docs/C/req/naif_ids.html

  Notes:
  ------
  DE430 carries the barycenters (0-9), the Sun, Mercury, Venus, Earth and Moon.
  Planet centers of Mars (499) and Jupiter (599) need the satellite kernels
  (mar097.bsp, jup310.bsp).
  """
  SOLAR_SYSTEM_BARYCENTER = 0

  SUN     = 10
  MERCURY = 199
  VENUS   = 299
  EARTH   = 399
  MOON    = 301
  MARS    = 499
  JUPITER = 599
  SATURN  = 699
  URANUS  = 799
  NEPTUNE = 899
  PLUTO   = 999

  EARTH_BARYCENTER   = 3
  MARS_BARYCENTER    = 4
  JUPITER_BARYCENTER = 5


# Bodies whose constants are pulled from the kernel pool by default
SOLAR_SYSTEM_BODY_NAMES = (
  'SOLAR_SYSTEM_BARYCENTER',
  'MERCURY BARYCENTER',
  'VENUS BARYCENTER',
  'EARTH BARYCENTER',
  'MARS BARYCENTER',
  'JUPITER BARYCENTER',
  'SATURN BARYCENTER',
  'URANUS BARYCENTER',
  'NEPTUNE BARYCENTER',
  'PLUTO BARYCENTER',
  'SUN',
  'MERCURY',
  'VENUS',
  'EARTH',
  'MOON',
  'MARS',
  'PHOBOS',
  'DEIMOS',
  'JUPITER',
  'IO',
  'EUROPA',
  'GANYMEDE',
  'CALLISTO',
  'SATURN',
  'MIMAS',
  'ENCELADUS',
  'TETHYS',
  'DIONE',
  'RHEA',
  'TITAN',
  'URANUS',
  'NEPTUNE',
  'PLUTO',
)
