#!/usr/bin/env python3

"""
  Utilities shared by the EMCal analysis tasks.
"""

# Data analysis
import numpy as np

# Base class
from pydijet.alice_analysis.process.base import common_base

# Beam types
BEAM_TYPES = ['pp', 'pPb', 'PbPb']

################################################################
class ProcessUtils(common_base.CommonBase):

  #---------------------------------------------------------------
  # Constructor
  #---------------------------------------------------------------
  def __init__(self, **kwargs):
    super(ProcessUtils, self).__init__(**kwargs)

  #---------------------------------------------------------------
  # Check beam type and return whether it is pp
  #---------------------------------------------------------------
  def is_pp(self, beam_type):

    if beam_type not in BEAM_TYPES:
      raise ValueError('Unknown beam type {} (expected one of {})'.format(beam_type, BEAM_TYPES))

    return beam_type == 'pp'

  #---------------------------------------------------------------
  # Return centrality bin for a given centrality, or -1 if outside all bins.
  # cent_bins are the bin edges; the last bin includes its upper edge.
  #---------------------------------------------------------------
  def cent_bin(self, centrality, cent_bins):

    n_bins = len(cent_bins) - 1
    for i in range(n_bins):
      if cent_bins[i] <= centrality < cent_bins[i+1]:
        return i
    if n_bins > 0 and centrality == cent_bins[-1]:
      return n_bins - 1

    return -1

  #---------------------------------------------------------------
  # Map an azimuthal angle into [0, 2pi)
  #---------------------------------------------------------------
  def phi_0_2pi(self, phi):

    phi = np.mod(phi, 2*np.pi)
    if phi >= 2*np.pi:
      phi = 0.
    return float(phi)
