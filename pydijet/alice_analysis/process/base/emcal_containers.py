#!/usr/bin/env python3

"""
  Event content seen by an EMCal analysis task: jets, particles (tracks),
  calorimeter clusters and cells, grouped in named containers.

  Each container holds all entries of one collection for the current event
  and the subset passing its acceptance cuts. Containers are configured once
  per run and reloaded with set_entries() for every event.
"""

import math

import numpy as np

# Base class
from pydijet.alice_analysis.process.base import common_base

################################################################
class Jet(common_base.CommonBase):

  #---------------------------------------------------------------
  # Constructor
  #   max_track_pt / max_cluster_pt: pt of the leading charged / neutral constituent
  #---------------------------------------------------------------
  def __init__(self, pt=0., eta=0., phi=0., area=0., max_track_pt=0., max_cluster_pt=0., **kwargs):
    super(Jet, self).__init__(**kwargs)
    self.pt = pt
    self.eta = eta
    self.phi = phi
    self.area = area
    self.max_track_pt = max_track_pt
    self.max_cluster_pt = max_cluster_pt

  def __repr__(self):
    return 'Jet(pt={:.3f}, eta={:.3f}, phi={:.3f}, area={:.3f})'.format(self.pt, self.eta, self.phi, self.area)

################################################################
class Particle(common_base.CommonBase):

  #---------------------------------------------------------------
  # Constructor
  #   eta_emcal, phi_emcal, pt_emcal: kinematics propagated to the EMCal surface (tracks only)
  #   emcal_cluster: index of the matched cluster in the first cluster container, -1 if none
  #---------------------------------------------------------------
  def __init__(self, pt=0., eta=0., phi=0., p=None, eta_emcal=0., phi_emcal=0., pt_emcal=0.,
               emcal_cluster=-1, **kwargs):
    super(Particle, self).__init__(**kwargs)
    self.pt = pt
    self.eta = eta
    self.phi = phi
    self.p = p if p is not None else pt * math.cosh(eta)
    self.eta_emcal = eta_emcal
    self.phi_emcal = phi_emcal
    self.pt_emcal = pt_emcal
    self.emcal_cluster = emcal_cluster

  def __repr__(self):
    return 'Particle(pt={:.3f}, eta={:.3f}, phi={:.3f})'.format(self.pt, self.eta, self.phi)

################################################################
class Cluster(common_base.CommonBase):

  #---------------------------------------------------------------
  # Constructor
  #---------------------------------------------------------------
  def __init__(self, energy=0., eta=0., phi=0., is_emcal=True, is_phos=False, is_exotic=False,
               nonlin_corr_energy=None, had_corr_energy=None, **kwargs):
    super(Cluster, self).__init__(**kwargs)
    self.energy = energy
    self.eta = eta
    self.phi = phi
    self.is_emcal = is_emcal
    self.is_phos = is_phos
    self.is_exotic = is_exotic
    self.nonlin_corr_energy = nonlin_corr_energy if nonlin_corr_energy is not None else energy
    self.had_corr_energy = had_corr_energy if had_corr_energy is not None else self.nonlin_corr_energy

  def __repr__(self):
    return 'Cluster(E={:.3f}, eta={:.3f}, phi={:.3f})'.format(self.energy, self.eta, self.phi)

################################################################
class CaloCells(common_base.CommonBase):

  #---------------------------------------------------------------
  # Constructor
  #---------------------------------------------------------------
  def __init__(self, name='emcalCells', cell_numbers=(), amplitudes=(), **kwargs):
    super(CaloCells, self).__init__(**kwargs)
    self.name = name
    self.cell_numbers = np.asarray(cell_numbers, dtype=int)
    self.amplitudes = np.asarray(amplitudes, dtype=float)
    if len(self.cell_numbers) != len(self.amplitudes):
      raise ValueError('CaloCells {}: {} cell numbers but {} amplitudes'.format(
        name, len(self.cell_numbers), len(self.amplitudes)))

  def get_number_of_cells(self):
    return len(self.cell_numbers)

################################################################
class EmcalContainer(common_base.CommonBase):

  #---------------------------------------------------------------
  # Constructor
  #   Cuts default to "no cut"; pt_min applies to the container's
  #   momentum-like quantity (pt for jets and particles, energy for clusters)
  #---------------------------------------------------------------
  def __init__(self, name='', pt_min=0., eta_min=-np.inf, eta_max=np.inf, phi_min=-10., phi_max=10., **kwargs):
    super(EmcalContainer, self).__init__(**kwargs)
    self.name = name
    self.pt_min = pt_min
    self.eta_min = eta_min
    self.eta_max = eta_max
    self.phi_min = phi_min
    self.phi_max = phi_max
    self.set_entries([])

  #---------------------------------------------------------------
  # Load the entries of the current event
  #---------------------------------------------------------------
  def set_entries(self, entries):
    self.entries = list(entries)
    self.accepted_entries = [entry for entry in self.entries if self.is_accepted(entry)]
    self.accepted_ids = set(id(entry) for entry in self.accepted_entries)

  def all(self):
    return self.entries

  def accepted(self):
    return self.accepted_entries

  #---------------------------------------------------------------
  # Kinematic acceptance; subclasses add their own criteria
  #---------------------------------------------------------------
  def is_accepted(self, entry):

    if self.momentum(entry) < self.pt_min:
      return False
    if entry.eta < self.eta_min or entry.eta > self.eta_max:
      return False
    if entry.phi < self.phi_min or entry.phi > self.phi_max:
      return False

    return True

  def momentum(self, entry):
    return entry.pt

  def __len__(self):
    return len(self.entries)

################################################################
class JetContainer(EmcalContainer):

  # leading hadron types
  kCharged = 0
  kNeutral = 1
  kBoth = 2

  #---------------------------------------------------------------
  # Constructor
  #   rho_name: name of the background density used to correct jet pt
  #             (None if no correction is configured)
  #---------------------------------------------------------------
  def __init__(self, name='', rho_name=None, leading_hadron_type=0, area_min=0., **kwargs):
    super(JetContainer, self).__init__(name=name, **kwargs)
    self.rho_name = rho_name
    self.leading_hadron_type = leading_hadron_type
    self.area_min = area_min
    self.rho = None

    if self.leading_hadron_type not in (self.kCharged, self.kNeutral, self.kBoth):
      raise ValueError('JetContainer {}: unknown leading hadron type {}'.format(name, leading_hadron_type))

  def is_accepted(self, jet):
    if jet.area < self.area_min:
      return False
    return super(JetContainer, self).is_accepted(jet)

  #---------------------------------------------------------------
  # Set the background density of the current event (None if not available)
  #---------------------------------------------------------------
  def set_rho(self, rho):
    if self.rho_name is None:
      self.rho = None
    else:
      self.rho = rho

  def has_rho(self):
    return self.rho is not None

  def rho_val(self):
    return self.rho if self.rho is not None else 0.

  #---------------------------------------------------------------
  # Background-subtracted jet pt
  #---------------------------------------------------------------
  def corrected_pt(self, jet):
    return jet.pt - self.rho_val() * jet.area

  #---------------------------------------------------------------
  # Leading accepted jet, by corrected pt if rho is available.
  # On equal pt the first jet in the container is kept.
  #---------------------------------------------------------------
  def leading_jet(self):

    use_rho = self.has_rho()
    leading_jet = None
    leading_pt = 0.
    for jet in self.accepted_entries:
      pt = self.corrected_pt(jet) if use_rho else jet.pt
      if leading_jet is None or pt > leading_pt:
        leading_jet = jet
        leading_pt = pt

    return leading_jet

  #---------------------------------------------------------------
  # pt of the leading hadron of a jet, according to leading_hadron_type
  #---------------------------------------------------------------
  def leading_hadron_pt(self, jet):

    if self.leading_hadron_type == self.kCharged:
      return jet.max_track_pt
    elif self.leading_hadron_type == self.kNeutral:
      return jet.max_cluster_pt
    return max(jet.max_track_pt, jet.max_cluster_pt)

################################################################
class ParticleContainer(EmcalContainer):

  #---------------------------------------------------------------
  # Constructor
  #   is_track: entries are reconstructed tracks with kinematics
  #             propagated to the EMCal surface
  #---------------------------------------------------------------
  def __init__(self, name='', is_track=False, **kwargs):
    super(ParticleContainer, self).__init__(name=name, **kwargs)
    self.is_track = is_track

################################################################
class ClusterContainer(EmcalContainer):

  #---------------------------------------------------------------
  # Constructor
  #---------------------------------------------------------------
  def __init__(self, name='', e_min=0., exclude_exotic=True, **kwargs):
    super(ClusterContainer, self).__init__(name=name, pt_min=e_min, **kwargs)
    self.exclude_exotic = exclude_exotic

  def momentum(self, cluster):
    return cluster.energy

  def is_accepted(self, cluster):
    if self.exclude_exotic and cluster.is_exotic:
      return False
    return super(ClusterContainer, self).is_accepted(cluster)

  #---------------------------------------------------------------
  # Cluster at a given index of all(), if it is accepted
  #---------------------------------------------------------------
  def accepted_at(self, index):
    if index < 0 or index >= len(self.entries):
      return None
    cluster = self.entries[index]
    if id(cluster) in self.accepted_ids:
      return cluster
    return None

################################################################
class EmcalEvent(common_base.CommonBase):

  #---------------------------------------------------------------
  # Constructor
  #   jets, particles, clusters: dict of container name -> list of entries
  #   rho: dict of rho name -> value
  #   cells: CaloCells, or None if not available
  #---------------------------------------------------------------
  def __init__(self, run_number=0, ev_id=0, centrality=0., jets=None, particles=None, clusters=None,
               rho=None, cells=None, **kwargs):
    super(EmcalEvent, self).__init__(**kwargs)
    self.run_number = run_number
    self.ev_id = ev_id
    self.centrality = centrality
    self.jets = jets if jets is not None else {}
    self.particles = particles if particles is not None else {}
    self.clusters = clusters if clusters is not None else {}
    self.rho = rho if rho is not None else {}
    self.cells = cells
