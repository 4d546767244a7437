#!/usr/bin/env python3

"""
  Dijet selection for the dijet imbalance analysis.

  For each jet container and event the trigger jet is the leading accepted
  jet. For every cell of the threshold grid the associated jet is searched
  among all accepted jets (the trigger jet itself is not excluded): it must
  pass the cell's associated pt threshold and be separated from the trigger
  by at least delta_phi_min in azimuth, and the highest corrected pt wins.
  Candidates are scanned in container order and only a strictly larger pt
  replaces the current best, so on equal pt the first candidate is kept.

  If no associated jet is found the trigger is recorded as unmatched, together
  with the highest-pt jet below the trigger pt (no angular or pt threshold).
"""

import collections

# Minimum pt distance (GeV) below the trigger for the unmatched subleading jet
SUBLEADING_PT_GUARD = 0.01

DijetPair = collections.namedtuple('DijetPair', ['trig_jet', 'ass_jet', 'trig_jet_pt', 'ass_jet_pt',
                                                 'aj', 'xj', 'delta_phi'])

UnmatchedTrigger = collections.namedtuple('UnmatchedTrigger', ['trig_jet', 'trig_jet_pt',
                                                               'subleading_jet', 'subleading_jet_pt'])

#---------------------------------------------------------------
# Trigger jet and its corrected pt, or (None, None) if the container has no accepted jet
#---------------------------------------------------------------
def find_trigger_jet(jet_cont):

  trig_jet = jet_cont.leading_jet()
  if trig_jet is None:
    return None, None

  return trig_jet, jet_cont.corrected_pt(trig_jet)

#---------------------------------------------------------------
# Highest corrected-pt accepted jet with pt >= ass_jet_min_pt and
# |trig phi - phi| >= delta_phi_min
#---------------------------------------------------------------
def find_associated_jet(jet_cont, trig_jet, ass_jet_min_pt, delta_phi_min):

  ass_jet = None
  ass_jet_pt = None
  for ass_jet_cand in jet_cont.accepted():

    ass_jet_cand_pt = jet_cont.corrected_pt(ass_jet_cand)
    if ass_jet_cand_pt < ass_jet_min_pt:
      continue
    if abs(trig_jet.phi - ass_jet_cand.phi) < delta_phi_min:
      continue
    if ass_jet is not None and not ass_jet_cand_pt > ass_jet_pt:
      continue

    ass_jet = ass_jet_cand
    ass_jet_pt = ass_jet_cand_pt

  return ass_jet

#---------------------------------------------------------------
# Highest corrected-pt accepted jet with pt < trig_jet_pt - guard
#---------------------------------------------------------------
def find_subleading_jet(jet_cont, trig_jet_pt, guard=SUBLEADING_PT_GUARD):

  subleading_jet = None
  subleading_jet_pt = None
  for subleading_jet_cand in jet_cont.accepted():

    subleading_jet_cand_pt = jet_cont.corrected_pt(subleading_jet_cand)
    if not subleading_jet_cand_pt < trig_jet_pt - guard:
      continue
    if subleading_jet is not None and not subleading_jet_cand_pt > subleading_jet_pt:
      continue

    subleading_jet = subleading_jet_cand
    subleading_jet_pt = subleading_jet_cand_pt

  return subleading_jet

#---------------------------------------------------------------
# Dijet observables for a trigger/associated pair
#---------------------------------------------------------------
def dijet_pair(trig_jet, ass_jet, trig_jet_pt, ass_jet_pt):

  aj = (trig_jet_pt - ass_jet_pt) / (trig_jet_pt + ass_jet_pt)
  xj = ass_jet_pt / trig_jet_pt
  delta_phi = abs(trig_jet.phi - ass_jet.phi)

  return DijetPair(trig_jet, ass_jet, trig_jet_pt, ass_jet_pt, aj, xj, delta_phi)

#---------------------------------------------------------------
# Outcome for one grid cell: DijetPair, UnmatchedTrigger, or None if the
# trigger fails the cell's leading hadron or trigger pt threshold
#---------------------------------------------------------------
def select_dijet(jet_cont, trig_jet, trig_jet_pt, cell, delta_phi_min, leading_hadron_pt=None):

  if leading_hadron_pt is None:
    leading_hadron_pt = jet_cont.leading_hadron_pt(trig_jet)
  if leading_hadron_pt < cell.leading_hadron_cut:
    return None
  if trig_jet_pt < cell.trig_jet_min_pt:
    return None

  ass_jet = find_associated_jet(jet_cont, trig_jet, cell.ass_jet_min_pt, delta_phi_min)
  if ass_jet is not None:
    return dijet_pair(trig_jet, ass_jet, trig_jet_pt, jet_cont.corrected_pt(ass_jet))

  subleading_jet = find_subleading_jet(jet_cont, trig_jet_pt)
  subleading_jet_pt = jet_cont.corrected_pt(subleading_jet) if subleading_jet is not None else None
  return UnmatchedTrigger(trig_jet, trig_jet_pt, subleading_jet, subleading_jet_pt)
