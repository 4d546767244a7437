#!/usr/bin/env python3

"""
  Analysis IO class: builds EmcalEvents from tables of jets, particles,
  clusters and cells.

  Every table has one row per object and carries the event identifier
  columns (run_number, ev_id). The event table has one row per event with
  the centrality and one column per background density (rho) name.
  Tables can be given as pandas dataframes, or read from ROOT TTrees with
  uproot (one tree per container, named after the container).
"""

import sys

# Data analysis
import uproot
import pandas

# Analysis utilities
from pydijet.alice_analysis.process.base import common_base
from pydijet.alice_analysis.process.base import emcal_containers
from pydijet.mputils import pinfo

JET_COLUMNS = ['pt', 'eta', 'phi', 'area', 'max_track_pt', 'max_cluster_pt']
PARTICLE_COLUMNS = ['pt', 'eta', 'phi', 'p', 'eta_emcal', 'phi_emcal', 'pt_emcal', 'emcal_cluster']
CLUSTER_COLUMNS = ['energy', 'eta', 'phi', 'is_emcal', 'is_phos', 'is_exotic', 'nonlin_corr_energy', 'had_corr_energy']

################################################################
class ProcessIO(common_base.CommonBase):

  #---------------------------------------------------------------
  # Constructor
  #---------------------------------------------------------------
  def __init__(self, input_file='', tree_dir='', event_tree_name='tree_event_char',
               jet_tree_names=(), particle_tree_names=(), cluster_tree_names=(),
               cell_tree_name=None, calo_cells_name='emcalCells', rho_names=(), **kwargs):
    super(ProcessIO, self).__init__(**kwargs)
    self.input_file = input_file
    self.tree_dir = tree_dir
    if len(tree_dir) and tree_dir[-1] != '/':
      self.tree_dir += '/'
    self.event_tree_name = event_tree_name
    self.jet_tree_names = list(jet_tree_names)
    self.particle_tree_names = list(particle_tree_names)
    self.cluster_tree_names = list(cluster_tree_names)
    self.cell_tree_name = cell_tree_name
    self.calo_cells_name = calo_cells_name
    self.rho_names = list(rho_names)

    # Set the combination of fields that give a unique event id
    self.unique_identifier = ['run_number', 'ev_id']

  #---------------------------------------------------------------
  # Read all configured trees and return the list of events
  #---------------------------------------------------------------
  def load_data(self):

    print('Convert ROOT trees to pandas dataframes...')
    event_df = self.load_dataframe(self.event_tree_name)
    jet_dfs = {name: self.load_dataframe(name) for name in self.jet_tree_names}
    particle_dfs = {name: self.load_dataframe(name) for name in self.particle_tree_names}
    cluster_dfs = {name: self.load_dataframe(name) for name in self.cluster_tree_names}
    cell_df = self.load_dataframe(self.cell_tree_name) if self.cell_tree_name else None

    return self.build_events(event_df, jet_dfs, particle_dfs, cluster_dfs, cell_df)

  #---------------------------------------------------------------
  # Convert a ROOT TTree to a pandas dataframe
  #---------------------------------------------------------------
  def load_dataframe(self, tree_name):

    full_name = self.tree_dir + tree_name
    with uproot.open(self.input_file) as f:
      if full_name not in f:
        sys.exit('Tree {} not found in file {}'.format(full_name, self.input_file))
      return f[full_name].arrays(library='pd')

  #---------------------------------------------------------------
  # Group the tables by event and build one EmcalEvent per row of event_df
  #---------------------------------------------------------------
  def build_events(self, event_df, jet_dfs=None, particle_dfs=None, cluster_dfs=None, cell_df=None):

    if not isinstance(event_df, pandas.DataFrame):
      event_df = pandas.DataFrame(event_df)
    n_duplicates = sum(event_df.duplicated(self.unique_identifier))
    if n_duplicates > 0:
      sys.exit('ERROR: There appear to be {} duplicate events in the event dataframe'.format(n_duplicates))

    jet_groups = self.group_by_event(jet_dfs or {})
    particle_groups = self.group_by_event(particle_dfs or {})
    cluster_groups = self.group_by_event(cluster_dfs or {})
    cell_groups = self.group_by_event({self.calo_cells_name: cell_df}) if cell_df is not None else None

    events = []
    for row in event_df.itertuples(index=False):

      ev_key = (int(row.run_number), int(row.ev_id))
      rho = {}
      for rho_name in self.rho_names:
        if hasattr(row, rho_name):
          rho[rho_name] = float(getattr(row, rho_name))

      cells = None
      if cell_groups is not None:
        cell_rows = cell_groups[self.calo_cells_name].get(ev_key)
        if cell_rows is None:
          cells = emcal_containers.CaloCells(name=self.calo_cells_name)
        else:
          cells = emcal_containers.CaloCells(name=self.calo_cells_name,
                                             cell_numbers=cell_rows['cell_number'].values,
                                             amplitudes=cell_rows['amplitude'].values)

      events.append(emcal_containers.EmcalEvent(
        run_number=ev_key[0], ev_id=ev_key[1],
        centrality=float(getattr(row, 'centrality', 0.)),
        jets=self.make_entries(jet_groups, ev_key, emcal_containers.Jet, JET_COLUMNS),
        particles=self.make_entries(particle_groups, ev_key, emcal_containers.Particle, PARTICLE_COLUMNS),
        clusters=self.make_entries(cluster_groups, ev_key, emcal_containers.Cluster, CLUSTER_COLUMNS),
        rho=rho, cells=cells))

    pinfo('ProcessIO: built {} events'.format(len(events)))
    return events

  #---------------------------------------------------------------
  # dict of name -> dataframe  =>  dict of name -> {event key: dataframe}
  #---------------------------------------------------------------
  def group_by_event(self, dfs):

    groups = {}
    for name, df in dfs.items():
      groups[name] = {(int(key[0]), int(key[1])): df_event
                      for key, df_event in df.groupby(self.unique_identifier)}
    return groups

  #---------------------------------------------------------------
  # Build container entries of one event; only columns present in the
  # table are passed on, the others keep their defaults
  #---------------------------------------------------------------
  def make_entries(self, groups, ev_key, entry_class, columns):

    entries = {}
    for name, events in groups.items():
      df_event = events.get(ev_key)
      if df_event is None:
        entries[name] = []
        continue
      present = [c for c in columns if c in df_event.columns]
      entries[name] = [entry_class(**self.row_values(row, present))
                       for row in df_event[present].to_dict('records')]
    return entries

  #---------------------------------------------------------------
  # Convert numpy scalars of a row to python types
  #---------------------------------------------------------------
  def row_values(self, row, columns):
    return {c: row[c].item() if hasattr(row[c], 'item') else row[c] for c in columns}
