import numpy as np

from n_body_high_fidelity.model.ephemeris      import spice_kernels_loaded
from n_body_high_fidelity.model.time_converter import et_to_utc
from n_body_high_fidelity.utility.time_helper  import format_time_offset


def print_results_summary(
  result  : dict,
  problem,
) -> None:
  """
  Print a summary of the propagation results.
  
  Input:
  ------
    result : dict
      Result of propagate_n_body.
    problem : NBodyProblem
      Problem that was propagated.
  """
  print("\nResults Summary")

  time_et_f = result['time'][-1]
  if spice_kernels_loaded():
    time_f_str = f"{et_to_utc(time_et_f)} UTC ({time_et_f:.6f} ET)"
  else:
    time_f_str = f"{time_et_f:.6f} ET"

  pos_vec_f = result['state'][0:3, -1]
  vel_vec_f = result['state'][3:6, -1]

  print(f"  Final State")
  print(f"    Epoch    : {time_f_str}")
  print(f"    Elapsed  : {format_time_offset(time_et_f - problem.timespan[0])}")
  print(f"    Frame    : {problem.ref_frame} (center {problem.id_center})")
  print(f"    Samples  : {len(result['time'])} ({result['nfev']} function evaluations)")
  print(f"    Position : {pos_vec_f[0]:>19.12e}  {pos_vec_f[1]:>19.12e}  {pos_vec_f[2]:>19.12e} km")
  print(f"    Velocity : {vel_vec_f[0]:>19.12e}  {vel_vec_f[1]:>19.12e}  {vel_vec_f[2]:>19.12e} km/s")

  if 'stm' in result:
    stm_f         = result['stm'][-1]
    sensitivity_f = result['sensitivity'][:, -1]
    print(f"  Final State Transition Matrix")
    for row in stm_f:
      print("    " + "  ".join(f"{value:>19.12e}" for value in row))
    print(f"  Final Epoch Sensitivity")
    print(f"    Position : {sensitivity_f[0]:>19.12e}  {sensitivity_f[1]:>19.12e}  {sensitivity_f[2]:>19.12e} km/s")
    print(f"    Velocity : {sensitivity_f[3]:>19.12e}  {sensitivity_f[4]:>19.12e}  {sensitivity_f[5]:>19.12e} km/s²")
    print(f"    Det(STM) : {np.linalg.det(stm_f):>19.12e}")
