#!/usr/bin/env python3

"""
  Grid of leading-hadron, trigger-jet and associated-jet pt thresholds
  used by the dijet selection.

  The grid is the ordered Cartesian product
    (leading hadron cut k) x (trigger jet min pt i) x (associated jet min pt fraction j)
  iterated with k slowest and j fastest. Each cell carries its indices,
  its thresholds, and the derived associated jet min pt (trig_jet_min_pt * frac).
"""

import collections
import itertools

# Base class
from pydijet.alice_analysis.process.base import common_base

# Default thresholds (GeV)
LEADING_HADRON_CUTS = [0., 5.]
TRIG_JET_MIN_PT = [35., 40., 45., 50.]
ASS_JET_MIN_PT_FRAC = [0., 0.4, 0.5, 0.6]

################################################################
class GridCell(collections.namedtuple('GridCell', ['k', 'i', 'j', 'leading_hadron_cut',
                                                    'trig_jet_min_pt', 'ass_jet_min_pt_frac',
                                                    'ass_jet_min_pt'])):
  __slots__ = ()

  #---------------------------------------------------------------
  # Histogram label suffix, e.g. _had1_trig2_ass3
  #---------------------------------------------------------------
  @property
  def label(self):
    return '_had{}_trig{}_ass{}'.format(self.k, self.i, self.j)

################################################################
class ThresholdGrid(common_base.CommonBase):

  #---------------------------------------------------------------
  # Constructor
  #---------------------------------------------------------------
  def __init__(self, leading_hadron_cuts=None, trig_jet_min_pt=None, ass_jet_min_pt_frac=None, **kwargs):
    super(ThresholdGrid, self).__init__(**kwargs)

    self.leading_hadron_cuts = list(leading_hadron_cuts if leading_hadron_cuts is not None else LEADING_HADRON_CUTS)
    self.trig_jet_min_pt = list(trig_jet_min_pt if trig_jet_min_pt is not None else TRIG_JET_MIN_PT)
    self.ass_jet_min_pt_frac = list(ass_jet_min_pt_frac if ass_jet_min_pt_frac is not None else ASS_JET_MIN_PT_FRAC)

    if not (self.leading_hadron_cuts and self.trig_jet_min_pt and self.ass_jet_min_pt_frac):
      raise ValueError('ThresholdGrid: every threshold list must have at least one entry')

    # A selected trigger has pt > 0 and its associated jet pt >= 0, so A_J and x_J are defined
    if min(self.trig_jet_min_pt) <= 0:
      raise ValueError('ThresholdGrid: trigger jet min pt must be positive, got {}'.format(self.trig_jet_min_pt))
    if min(self.ass_jet_min_pt_frac) < 0:
      raise ValueError('ThresholdGrid: associated jet min pt fractions must not be negative, got {}'.format(
        self.ass_jet_min_pt_frac))

    self.cells = tuple(self.build_cells())

  #---------------------------------------------------------------
  # Enumerate the cells in (k, i, j) order
  #---------------------------------------------------------------
  def build_cells(self):

    for (k, had_cut), (i, trig_min_pt), (j, frac) in itertools.product(
        enumerate(self.leading_hadron_cuts), enumerate(self.trig_jet_min_pt),
        enumerate(self.ass_jet_min_pt_frac)):
      yield GridCell(k, i, j, had_cut, trig_min_pt, frac, trig_min_pt * frac)

  #---------------------------------------------------------------
  # Look up a single cell by its indices
  #---------------------------------------------------------------
  def cell(self, k, i, j):
    n_i = len(self.trig_jet_min_pt)
    n_j = len(self.ass_jet_min_pt_frac)
    if not (0 <= k < len(self.leading_hadron_cuts) and 0 <= i < n_i and 0 <= j < n_j):
      raise IndexError('ThresholdGrid: no cell ({}, {}, {})'.format(k, i, j))
    return self.cells[(k * n_i + i) * n_j + j]

  def __iter__(self):
    return iter(self.cells)

  def __len__(self):
    return len(self.cells)
