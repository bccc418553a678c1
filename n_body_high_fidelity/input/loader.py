"""
SPICE Kernel Loader
===================

Explicit, one-time loading of the SPICE kernels the propagator reads from.

Kernels are never downloaded here. Missing files are reported with the NAIF
generic-kernels location they can be fetched from.
"""
import os
import spiceypy as spice

from pathlib import Path
from typing  import Optional


# Base URL of the NAIF generic kernels (for error messages only)
GENERIC_KERNELS_URL = "https://naif.jpl.nasa.gov/pub/naif/generic_kernels"

# Environment variable overriding the default kernels folder
SPICE_KERNELS_ENV_VAR = 'N_BODY_SPICE_KERNELS'

# Default kernel set, as paths relative to the generic kernels root
DEFAULT_KERNELS = (
  'lsk/naif0012.tls',           # leap seconds
  'pck/gm_de431.tpc',           # gravitational parameters
  'pck/pck00010.tpc',           # radii and orientation
  'spk/planets/de430.bsp',      # planetary ephemeris
  'spk/satellites/mar097.bsp',  # Mars system (499)
  'spk/satellites/jup310.bsp',  # Jupiter system (599)
)


def get_spice_kernels_folderpath(
  spice_kernels_folderpath : Optional[Path] = None,
) -> Path:
  """
  Resolve the folder holding the SPICE kernels.

  Input:
  ------
    spice_kernels_folderpath : Path, optional
      Explicit folder. If None, the N_BODY_SPICE_KERNELS environment variable
      is used, then <project_folderpath>/data/spice_kernels.

  Output:
  -------
    folderpath : Path
  """
  if spice_kernels_folderpath is not None:
    return Path(spice_kernels_folderpath)

  env_folderpath = os.environ.get(SPICE_KERNELS_ENV_VAR)
  if env_folderpath:
    return Path(env_folderpath)

  project_folderpath = Path(__file__).parent.parent.parent
  return project_folderpath / 'data' / 'spice_kernels'


def find_kernel_filepath(
  spice_kernels_folderpath : Path,
  kernel_name              : str,
) -> Optional[Path]:
  """
  Find a kernel by file name anywhere below the kernels folder.

  Both flat folders (naif0012.tls) and mirrors of the NAIF layout
  (lsk/naif0012.tls) are accepted.

  Input:
  ------
    spice_kernels_folderpath : Path
      Root folder to search.
    kernel_name : str
      Kernel path relative to the generic kernels root, or a bare file name.

  Output:
  -------
    kernel_filepath : Path | None
      First match in sorted order, or None.
  """
  direct_filepath = spice_kernels_folderpath / kernel_name
  if direct_filepath.is_file():
    return direct_filepath

  matches = sorted(spice_kernels_folderpath.rglob(Path(kernel_name).name))
  return matches[0] if matches else None


def load_spice_kernels(
  spice_kernels_folderpath : Optional[Path] = None,
  kernel_names             : tuple          = DEFAULT_KERNELS,
) -> list[Path]:
  """
  Load SPICE kernels. Must be called once before any propagation.

  Input:
  ------
    spice_kernels_folderpath : Path, optional
      Folder holding the kernels (see get_spice_kernels_folderpath).
    kernel_names : tuple of str
      Kernels to load, in order. Later kernels take precedence in SPICE.

  Output:
  -------
    kernel_filepaths : list[Path]
      Loaded kernel files.

  Raises:
  -------
    FileNotFoundError
      If the folder or any kernel is missing. Nothing is loaded in that case.
  """
  spice_kernels_folderpath = get_spice_kernels_folderpath(spice_kernels_folderpath)
  if not spice_kernels_folderpath.exists():
    raise FileNotFoundError(
      f"SPICE kernels folder not found: {spice_kernels_folderpath}\n"
      f"Set {SPICE_KERNELS_ENV_VAR} or download kernels from {GENERIC_KERNELS_URL}/"
    )

  # Resolve every file first so that a missing kernel leaves the pool untouched
  kernel_filepaths = []
  missing          = []
  for kernel_name in kernel_names:
    kernel_filepath = find_kernel_filepath(spice_kernels_folderpath, kernel_name)
    if kernel_filepath is None:
      missing.append(kernel_name)
    else:
      kernel_filepaths.append(kernel_filepath)

  if missing:
    raise FileNotFoundError(
      f"SPICE kernels not found in {spice_kernels_folderpath}:\n"
      + "\n".join(f"  - {kernel_name} ({GENERIC_KERNELS_URL}/{kernel_name})" for kernel_name in missing)
    )

  for kernel_filepath in kernel_filepaths:
    spice.furnsh(str(kernel_filepath))

  return kernel_filepaths


def unload_spice_kernels() -> None:
  """
  Unload all SPICE kernels.
  """
  spice.kclear()
