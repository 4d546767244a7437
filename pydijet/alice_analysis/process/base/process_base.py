#!/usr/bin/env python3

"""
  Analysis task base class for EMCal analyses (jets, tracks, clusters, cells).

  The base class reads the configuration, owns the containers and the
  histogram registry, and drives the event loop. For each run:
    - initialize_output_objects() is called once, before the first event
    - for every event, process_event() loads the containers, then calls
      run() and, if run() returns True, fill_histograms()
    - save_output_objects() writes every histogram to AnalysisResults.root

  User tasks inherit from this class and implement:
    - initialize_user_output_objects()
    - run()
    - fill_histograms()
"""

# General
import os
import sys
import time

# Data analysis
import uproot
import yaml

# Analysis utilities
from pydijet.alice_analysis.process.base import common_base
from pydijet.alice_analysis.process.base import process_utils
from pydijet.alice_analysis.process.base import emcal_containers
from pydijet.alice_analysis.process.base.hist_manager import HistManager, HistKey
from pydijet.mputils import pinfo, pwarning, pdebug

################################################################
class ProcessBase(common_base.CommonBase):

  #---------------------------------------------------------------
  # Constructor
  #---------------------------------------------------------------
  def __init__(self, config_file='', output_dir='', debug_level=0, name='', **kwargs):
    super(ProcessBase, self).__init__(**kwargs)
    self.config_file = config_file
    self.output_dir = output_dir
    self.debug_level = debug_level # (0 = no debug info, 1 = some debug info, 2 = all debug info)
    self.name = name if name else self.__class__.__name__

    # Create output dir
    if self.output_dir and not os.path.exists(self.output_dir):
      os.makedirs(self.output_dir)

    # Initialize utils class and histogram registry
    self.utils = process_utils.ProcessUtils()
    self.hist_manager = HistManager(name=self.name)

    self.event_number = 0
    self.cent_bin = -1
    self.calo_cells = None
    self.missing_rho_names = set()

  #---------------------------------------------------------------
  # Initialize config file into class members
  #---------------------------------------------------------------
  def initialize_config(self):

    # Read config file
    with open(self.config_file, 'r') as stream:
      config = yaml.safe_load(stream)

    if 'event_number_max' in config:
      self.event_number_max = config['event_number_max']
    else:
      self.event_number_max = sys.maxsize

    if 'debug_level' in config:
      self.debug_level = config['debug_level']

    # Beam type and centrality binning. The histograms are booked for every
    # centrality bin whatever the beam type; pp events always go to bin 0.
    self.beam_type = config['beam_type']
    self.is_pp = self.utils.is_pp(self.beam_type)
    self.cent_bins = config.get('cent_bins', [0., 10., 30., 50., 100.])
    self.n_cent_bins = len(self.cent_bins) - 1
    if self.n_cent_bins < 1:
      raise ValueError('cent_bins needs at least two edges, got {}'.format(self.cent_bins))

    # Global binning of pt axes
    self.nbins = config.get('nbins', 250)
    self.min_bin_pt = config.get('min_bin_pt', 0.)
    self.max_bin_pt = config.get('max_bin_pt', 250.)

    # Containers
    self.jet_containers = [emcal_containers.JetContainer(**cont_config)
                           for cont_config in config.get('jet_containers', [])]
    self.particle_containers = [emcal_containers.ParticleContainer(**cont_config)
                                for cont_config in config.get('particle_containers', [])]
    self.cluster_containers = [emcal_containers.ClusterContainer(**cont_config)
                               for cont_config in config.get('cluster_containers', [])]
    self.calo_cells_name = config.get('calo_cells_name', 'emcalCells')

    return config

  #---------------------------------------------------------------
  # Main processing function: book histograms, loop over events, write output
  #---------------------------------------------------------------
  def process_data(self, events):

    self.start_time = time.time()

    # Initialize histograms
    self.initialize_output_objects()
    print(self)

    print('Analyze events...')
    self.analyze_events(events)
    print('--- {} seconds ---'.format(time.time() - self.start_time))

    if self.output_dir:
      print('Save histograms...')
      self.save_output_objects()

    print('--- {} seconds ---'.format(time.time() - self.start_time))

  #---------------------------------------------------------------
  # Initialize histograms
  #---------------------------------------------------------------
  def initialize_output_objects(self):

    # Initialize user-specific histograms
    self.initialize_user_output_objects()

    # Initialize base histograms
    self.event_count_key = HistKey('', 'histEventCount')
    self.hist_manager.create_th1(self.event_count_key, 'histEventCount;0 = accepted, 1 = rejected;events', 2, 0, 2)

    pinfo('{}: booked {} histograms'.format(self.name, len(self.hist_manager)))

  #---------------------------------------------------------------
  # Main function to loop through and analyze events
  #---------------------------------------------------------------
  def analyze_events(self, events):

    for event in events:
      if self.event_number >= self.event_number_max:
        break
      self.process_event(event)

    pinfo('{}: processed {} events'.format(self.name, self.event_number))

  #---------------------------------------------------------------
  # Analyze a single event. Returns False if the event was rejected.
  #---------------------------------------------------------------
  def process_event(self, event):

    self.event_number += 1
    if self.debug_level > 1:
      print('-------------------------------------------------')
      print('event {} (run {}, ev_id {})'.format(self.event_number, event.run_number, event.ev_id))

    self.cent_bin = self.get_cent_bin(event.centrality)
    if self.cent_bin < 0:
      if self.debug_level > 0:
        pdebug('event {}: centrality {} outside of {}, rejected'.format(event.ev_id, event.centrality, self.cent_bins))
      self.hist_manager.fill_th1(self.event_count_key, 1)
      return False

    self.load_event(event)
    self.hist_manager.fill_th1(self.event_count_key, 0)

    if self.run(event):
      self.fill_histograms(event)

    return True

  #---------------------------------------------------------------
  # Return centrality bin of the event (always 0 for pp), -1 if outside
  #---------------------------------------------------------------
  def get_cent_bin(self, centrality):

    if self.is_pp:
      return 0

    return self.utils.cent_bin(centrality, self.cent_bins)

  #---------------------------------------------------------------
  # Load the entries of the event into the configured containers
  #---------------------------------------------------------------
  def load_event(self, event):

    for jet_cont in self.jet_containers:
      jet_cont.set_entries(event.jets.get(jet_cont.name, []))
      rho = None
      if jet_cont.rho_name is not None:
        rho = event.rho.get(jet_cont.rho_name)
        if rho is None and jet_cont.rho_name not in self.missing_rho_names:
          pwarning('{}: rho {} not found in event, jets of {} are not corrected'.format(
            self.name, jet_cont.rho_name, jet_cont.name))
          self.missing_rho_names.add(jet_cont.rho_name)
      jet_cont.set_rho(rho)

    for part_cont in self.particle_containers:
      part_cont.set_entries(event.particles.get(part_cont.name, []))

    for clus_cont in self.cluster_containers:
      clus_cont.set_entries(event.clusters.get(clus_cont.name, []))

    self.calo_cells = event.cells

  #---------------------------------------------------------------
  # Save all histograms
  #---------------------------------------------------------------
  def save_output_objects(self, filename='AnalysisResults.root'):

    outputfilename = os.path.join(self.output_dir, filename)
    with uproot.recreate(outputfilename) as fout:
      for key, h in self.hist_manager.items():
        fout[str(key)] = h

    pinfo('{}: wrote {} histograms to {}'.format(self.name, len(self.hist_manager), outputfilename))
    return outputfilename

  #---------------------------------------------------------------
  # This function is called once
  # You must implement this
  #---------------------------------------------------------------
  def initialize_user_output_objects(self):

    raise NotImplementedError('You must implement initialize_user_output_objects()!')

  #---------------------------------------------------------------
  # This function is called once per event, before fill_histograms()
  # You must implement this
  #---------------------------------------------------------------
  def run(self, event):

    raise NotImplementedError('You must implement run()!')

  #---------------------------------------------------------------
  # This function is called once per event, if run() returned True
  # You must implement this
  #---------------------------------------------------------------
  def fill_histograms(self, event):

    raise NotImplementedError('You must implement fill_histograms()!')
