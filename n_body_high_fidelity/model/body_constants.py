"""
Body Constants
==============

Gravitational parameters, radii and names of solar-system bodies, keyed by
NAIF ID.

A `BodyConstants` instance is built explicitly, either from a mapping or from
the SPICE kernel pool, and passed to the equations of motion. Nothing is cached
at module level.
"""
import spiceypy as spice

from typing                    import Optional, Protocol
from spiceypy.utils.exceptions import SpiceyError

from n_body_high_fidelity.errors          import KernelsNotLoadedError, UnknownBodyError
from n_body_high_fidelity.model.constants import CONVERTER, SOLAR_SYSTEM_BODY_NAMES
from n_body_high_fidelity.model.ephemeris import spice_kernels_loaded


class BodyConstantsProvider(Protocol):
  def gravitational_parameter(self, body_id: int) -> float:
    ...


class BodyConstants:
  """
  Solar-system body constants.

  Attributes:
  -----------
    au : float
      Astronomical unit [km].
    gp : dict[int, float]
      Gravitational parameter [km³/s²] by NAIF ID.
    radius : dict[int, float]
      Equatorial radius [km] by NAIF ID.
    name : dict[int, str]
      Body name by NAIF ID.
    naif_id : dict[str, int]
      NAIF ID by body name.
  """

  def __init__(
    self,
    gp     : dict,
    radius : Optional[dict] = None,
    name   : Optional[dict] = None,
    au     : float          = CONVERTER.KM_PER_AU,
  ):
    self.au      = au
    self.gp      = {int(body_id): float(value) for body_id, value in gp.items()}
    self.radius  = {int(body_id): float(value) for body_id, value in (radius or {}).items()}
    self.name    = {int(body_id): str(value)   for body_id, value in (name   or {}).items()}
    self.naif_id = {value: body_id for body_id, value in self.name.items()}

  @classmethod
  def from_spice(
    cls,
    body_names : tuple = SOLAR_SYSTEM_BODY_NAMES,
  ) -> 'BodyConstants':
    """
    Read constants for the given bodies from the SPICE kernel pool.

    Bodies that SPICE cannot name are skipped, as are missing GM or RADII
    entries for a named body.

    Input:
    ------
      body_names : tuple of str
        SPICE body names.

    Output:
    -------
      body_constants : BodyConstants

    Raises:
    -------
      KernelsNotLoadedError
        If no kernels are loaded.
    """
    if not spice_kernels_loaded():
      raise KernelsNotLoadedError(
        "No SPICE kernels are loaded. Call load_spice_kernels() before reading body constants."
      )

    gp, radius, name = {}, {}, {}
    for body_name in body_names:
      try:
        body_id = spice.bodn2c(body_name)
      except SpiceyError:
        continue

      name[body_id] = body_name
      if spice.bodfnd(body_id, 'GM'):
        _, values   = spice.bodvcd(body_id, 'GM', 1)
        gp[body_id] = float(values[0])
      if spice.bodfnd(body_id, 'RADII'):
        _, values       = spice.bodvcd(body_id, 'RADII', 3)
        radius[body_id] = float(values[0])

    return cls(gp=gp, radius=radius, name=name)

  def gravitational_parameter(
    self,
    body_id : int,
  ) -> float:
    """
    Input:
    ------
      body_id : int
        NAIF ID.

    Output:
    -------
      gp : float
        Gravitational parameter [km³/s²].

    Raises:
    -------
      UnknownBodyError
        If no gravitational parameter is known for the body.
    """
    try:
      return self.gp[int(body_id)]
    except KeyError:
      raise UnknownBodyError(body_id) from None

  def equatorial_radius(
    self,
    body_id : int,
  ) -> float:
    try:
      return self.radius[int(body_id)]
    except KeyError:
      raise UnknownBodyError(body_id, quantity='equatorial radius') from None

  def __contains__(self, body_id) -> bool:
    return int(body_id) in self.gp

  def __repr__(self) -> str:
    return f"BodyConstants({len(self.gp)} bodies with GM, {len(self.radius)} with radii)"
