#!/usr/bin/env python3

"""
  Dijet imbalance analysis task.

  Books and fills, per container and centrality bin:
    - QA histograms for jets, tracks, EMCal/PHOS clusters and EMCal cells
    - dijet histograms (leading/subleading jet pt and phi, A_J, x_J, delta phi,
      and unmatched leading/subleading jet pt) for every cell of the
      leading hadron x trigger pt x associated pt threshold grid

  Histogram names are
    <container>/<metric>_<cent>
    <container>/<metric>_<cent>_had<k>_trig<i>_ass<j>
"""

# Data analysis
import numpy as np

# Analysis utilities
from pydijet.alice_analysis.process.base import process_base
from pydijet.alice_analysis.process.base.hist_manager import HistKey
from pydijet.alice_analysis.process.base.threshold_grid import ThresholdGrid
from pydijet.alice_analysis.process.user.dijet import dijet_selection
from pydijet.mputils import pdebug

TWO_PI = 2*np.pi

################################################################
class ProcessDijetImbalance(process_base.ProcessBase):

  #---------------------------------------------------------------
  # Constructor
  #---------------------------------------------------------------
  def __init__(self, config_file='', output_dir='', debug_level=0, **kwargs):

    # Initialize base class
    super(ProcessDijetImbalance, self).__init__(config_file, output_dir, debug_level, **kwargs)

    # Initialize configuration
    self.initialize_config()

  #---------------------------------------------------------------
  # Initialize config file into class members
  #---------------------------------------------------------------
  def initialize_config(self):

    # Call base class initialization
    config = process_base.ProcessBase.initialize_config(self)

    self.delta_phi_min = config.get('delta_phi_min', 2.)

    # Threshold grid for the dijet selection; defaults unless overridden
    dijet_config = config.get('dijet', {}) or {}
    self.threshold_grid = ThresholdGrid(
      leading_hadron_cuts=dijet_config.get('leading_hadron_cuts'),
      trig_jet_min_pt=dijet_config.get('trig_jet_min_pt'),
      ass_jet_min_pt_frac=dijet_config.get('ass_jet_min_pt_frac'))

    return config

  #---------------------------------------------------------------
  # Multiplicity axis: wide for heavy-ion, narrow for pp
  #---------------------------------------------------------------
  def multiplicity_axis(self, max_AA, nbins_pp=200, max_pp=200):

    if self.is_pp:
      return nbins_pp, 0, max_pp
    return 500, 0, max_AA

  #---------------------------------------------------------------
  # Book all histograms
  #---------------------------------------------------------------
  def initialize_user_output_objects(self):

    self.allocate_cluster_histograms()
    self.allocate_track_histograms()
    self.allocate_jet_histograms()
    self.allocate_cell_histograms()
    self.allocate_dijet_histograms()

  #---------------------------------------------------------------
  # Cluster QA: energy, eta, phi and number of clusters, for all
  # clusters and separately for EMCal and PHOS clusters
  #---------------------------------------------------------------
  def allocate_cluster_histograms(self):

    hm = self.hist_manager
    nbins = self.nbins
    for clus_cont in self.cluster_containers:

      groupname = clus_cont.name
      hm.create_histo_group(groupname)
      for cent in range(self.n_cent_bins):

        # Cluster histograms (PHOS+EMCal)
        key = HistKey(groupname, 'histClusterEnergy', cent)
        hm.create_th1(key, '{};#it{{E}}_{{cluster}} (GeV);counts'.format(key), nbins // 2, self.min_bin_pt, self.max_bin_pt / 2)
        key = HistKey(groupname, 'histClusterEtaPhi', cent)
        hm.create_th2(key, '{};#it{{#eta}}_{{cluster}};#it{{#phi}}_{{cluster}};counts'.format(key), nbins // 6, -1, 1, nbins // 2, 0, TWO_PI)
        key = HistKey(groupname, 'histNClusters', cent)
        hm.create_th1(key, '{};number of clusters;events'.format(key), *self.multiplicity_axis(3000))

        # EMCal cluster histograms
        for metric, xtitle in [('histEMCalClusterEnergy', '#it{E}_{cluster} (GeV)'),
                               ('histEMCalClusterEnergyExotic', '#it{E}_{cluster}^{exotic} (GeV)'),
                               ('histEMCalClusterNonLinCorrEnergy', '#it{E}_{cluster}^{non-lin.corr.} (GeV)'),
                               ('histEMCalClusterHadCorrEnergy', '#it{E}_{cluster}^{had.corr.} (GeV)')]:
          key = HistKey(groupname, metric, cent)
          hm.create_th1(key, '{};{};counts'.format(key, xtitle), nbins // 2, self.min_bin_pt, self.max_bin_pt / 2)
        key = HistKey(groupname, 'histEMCalClusterPhi', cent)
        hm.create_th1(key, '{};#it{{#phi}}_{{cluster}};counts'.format(key), nbins // 2, 0, TWO_PI)
        key = HistKey(groupname, 'histEMCalClusterEta', cent)
        hm.create_th1(key, '{};#it{{#eta}}_{{cluster}};counts'.format(key), nbins // 6, -1, 1)
        key = HistKey(groupname, 'histEMCalNClusters', cent)
        hm.create_th1(key, '{};number of clusters;events'.format(key), *self.multiplicity_axis(3000))

        # PHOS cluster histograms
        key = HistKey(groupname, 'histPHOSClusterEnergy', cent)
        hm.create_th1(key, '{};#it{{E}}_{{cluster}} (GeV);counts'.format(key), nbins // 2, self.min_bin_pt, self.max_bin_pt / 2)
        key = HistKey(groupname, 'histPHOSClusterPhi', cent)
        hm.create_th1(key, '{};#it{{#phi}}_{{cluster}};counts'.format(key), nbins // 2, 0, TWO_PI)
        key = HistKey(groupname, 'histPHOSClusterEta', cent)
        hm.create_th1(key, '{};#it{{#eta}}_{{cluster}};counts'.format(key), nbins // 6, -1, 1)
        key = HistKey(groupname, 'histPHOSNClusters', cent)
        hm.create_th1(key, '{};number of clusters;events'.format(key), *self.multiplicity_axis(3000))

  #---------------------------------------------------------------
  # Cell QA: cell energy vs. absolute id, and number of cells
  #---------------------------------------------------------------
  def allocate_cell_histograms(self):

    hm = self.hist_manager
    groupname = self.calo_cells_name
    hm.create_histo_group(groupname)
    for cent in range(self.n_cent_bins):

      key = HistKey(groupname, 'histCellEnergyvsAbsId', cent)
      hm.create_th2(key, '{};cell abs. ID;#it{{E}}_{{cell}} (GeV);counts'.format(key),
                    20000, 0, 20000, self.nbins // 2, self.min_bin_pt, self.max_bin_pt / 2)
      key = HistKey(groupname, 'histNCells', cent)
      hm.create_th1(key, '{};number of cells;events'.format(key), *self.multiplicity_axis(6000))

  #---------------------------------------------------------------
  # Track QA: pt, eta, phi and number of tracks; for tracks also the
  # difference between vertex and EMCal-surface kinematics, and E/p
  #---------------------------------------------------------------
  def allocate_track_histograms(self):

    hm = self.hist_manager
    nbins = self.nbins
    for part_cont in self.particle_containers:

      groupname = part_cont.name
      hm.create_histo_group(groupname)
      for cent in range(self.n_cent_bins):

        key = HistKey(groupname, 'histTrackPt', cent)
        hm.create_th1(key, '{};#it{{p}}_{{T,track}} (GeV/#it{{c}});counts'.format(key), nbins // 2, self.min_bin_pt, self.max_bin_pt / 2)
        key = HistKey(groupname, 'histTrackPhi', cent)
        hm.create_th1(key, '{};#it{{#phi}}_{{track}};counts'.format(key), nbins // 2, 0, TWO_PI)
        key = HistKey(groupname, 'histTrackEta', cent)
        hm.create_th1(key, '{};#it{{#eta}}_{{track}};counts'.format(key), nbins // 6, -1, 1)

        if part_cont.is_track:
          key = HistKey(groupname, 'fHistDeltaEtaPt', cent)
          hm.create_th2(key, '{};#it{{p}}_{{T,track}}^{{vertex}} (GeV/#it{{c}});#it{{#eta}}_{{track}}^{{vertex}} - #it{{#eta}}_{{track}}^{{EMCal}};counts'.format(key),
                        nbins // 2, self.min_bin_pt, self.max_bin_pt, 50, -0.5, 0.5)
          key = HistKey(groupname, 'fHistDeltaPhiPt', cent)
          hm.create_th2(key, '{};#it{{p}}_{{T,track}}^{{vertex}} (GeV/#it{{c}});#it{{#phi}}_{{track}}^{{vertex}} - #it{{#phi}}_{{track}}^{{EMCal}};counts'.format(key),
                        nbins // 2, self.min_bin_pt, self.max_bin_pt, 200, -2, 2)
          key = HistKey(groupname, 'fHistDeltaPtvsPt', cent)
          hm.create_th2(key, '{};#it{{p}}_{{T,track}}^{{vertex}} (GeV/#it{{c}});#it{{p}}_{{T,track}}^{{vertex}} - #it{{p}}_{{T,track}}^{{EMCal}} (GeV/#it{{c}});counts'.format(key),
                        nbins // 2, self.min_bin_pt, self.max_bin_pt, nbins // 2, -self.max_bin_pt / 2, self.max_bin_pt / 2)
          key = HistKey(groupname, 'fHistEoverPvsP', cent)
          hm.create_th2(key, '{};#it{{P}}_{{track}} (GeV/#it{{c}});#it{{E}}_{{cluster}} / #it{{P}}_{{track}} #it{{c}};counts'.format(key),
                        nbins // 2, self.min_bin_pt, self.max_bin_pt, nbins // 2, 0, 4)

        key = HistKey(groupname, 'histNTracks', cent)
        hm.create_th1(key, '{};number of tracks;events'.format(key), *self.multiplicity_axis(5000))

  #---------------------------------------------------------------
  # Jet QA: pt, area, eta, phi, number of jets, and if the container
  # has a background density, corrected pt and rho
  #---------------------------------------------------------------
  def allocate_jet_histograms(self):

    hm = self.hist_manager
    nbins = self.nbins
    for jet_cont in self.jet_containers:

      groupname = jet_cont.name
      hm.create_histo_group(groupname)
      for cent in range(self.n_cent_bins):

        key = HistKey(groupname, 'histJetPt', cent)
        hm.create_th1(key, '{};#it{{p}}_{{T,jet}} (GeV/#it{{c}});counts'.format(key), nbins, self.min_bin_pt, self.max_bin_pt)
        key = HistKey(groupname, 'histJetArea', cent)
        hm.create_th1(key, '{};#it{{A}}_{{jet}};counts'.format(key), nbins // 2, 0, 1.5)
        key = HistKey(groupname, 'histJetPhi', cent)
        hm.create_th1(key, '{};#it{{#phi}}_{{jet}};counts'.format(key), nbins // 2, 0, TWO_PI)
        key = HistKey(groupname, 'histJetEta', cent)
        hm.create_th1(key, '{};#it{{#eta}}_{{jet}};counts'.format(key), nbins // 6, -1, 1)
        key = HistKey(groupname, 'histJetEtaPhi', cent)
        hm.create_th2(key, '{};#it{{#eta}}_{{jet}};#it{{#phi}}_{{jet}};counts'.format(key), nbins // 6, -1, 1, nbins // 2, 0, TWO_PI)
        key = HistKey(groupname, 'histNJets', cent)
        hm.create_th1(key, '{};number of jets;events'.format(key), *self.multiplicity_axis(500, 100, 100))

        if jet_cont.rho_name is not None:
          key = HistKey(groupname, 'histJetCorrPt', cent)
          hm.create_th1(key, '{};#it{{p}}_{{T,jet}}^{{corr}} (GeV/#it{{c}});counts'.format(key), nbins, -self.max_bin_pt / 2, self.max_bin_pt / 2)
          key = HistKey(groupname, 'histJetRho', cent)
          hm.create_th1(key, '{};{{#rho}} (GeV);counts'.format(key), nbins, 0, 500)

  #---------------------------------------------------------------
  # Dijet histograms: (metric, x title, nbins, xmin, xmax)
  #---------------------------------------------------------------
  def dijet_histogram_definitions(self):

    nbins, min_pt, max_pt = self.nbins, self.min_bin_pt, self.max_bin_pt
    return [('histDijetLeadingJetPt', 'Leading Jet p_{T} (GeV)', nbins, min_pt, max_pt),
            ('histDijetLeadingJetPtuncorr', 'Uncorrected Leading Jet p_{T} (GeV)', nbins, min_pt, max_pt),
            ('histDijetSubleadingJetPt', 'Subleading Jet p_{T} (GeV)', nbins, min_pt, max_pt),
            ('histDijetLeadingJetPhi', 'Leading Jet #phi', 100, 0, TWO_PI),
            ('histDijetSubleadingJetPhi', 'Subleading Jet #phi', 100, 0, TWO_PI),
            ('histDijetAJ', 'A_{J}', 100, 0, 1),
            ('histDijetxJ', 'x_{J}', 100, 0, 1),
            ('histDijetDeltaPhi', '#Delta#phi', 100, 0, 4),
            # Leading jets without an acceptable associated jet, and the subleading jet of those events
            ('histUnmatchedLeadingJetPt', 'Leading Jet p_{T} (GeV)', nbins, min_pt, max_pt),
            ('histUnmatchedSubleadingJetPt', 'Subleading Jet p_{T} (GeV)', nbins, min_pt, max_pt)]

  #---------------------------------------------------------------
  # Book the dijet histograms for every jet container, centrality bin
  # and threshold grid cell
  #---------------------------------------------------------------
  def allocate_dijet_histograms(self):

    hm = self.hist_manager
    definitions = self.dijet_histogram_definitions()
    for jet_cont in self.jet_containers:

      groupname = jet_cont.name
      for cent in range(self.n_cent_bins):
        for cell in self.threshold_grid:
          for metric, xtitle, nbins, xmin, xmax in definitions:
            key = HistKey(groupname, metric, cent, cell)
            hm.create_th1(key, '{};{};counts'.format(key, xtitle), nbins, xmin, xmax)

  #---------------------------------------------------------------
  # Dijet selection for every jet container and threshold grid cell.
  # Always returns True.
  #---------------------------------------------------------------
  def run(self, event):

    for jet_cont in self.jet_containers:

      # Get trigger jet
      trig_jet, trig_jet_pt = dijet_selection.find_trigger_jet(jet_cont)
      if trig_jet is None:
        continue
      leading_hadron_pt = jet_cont.leading_hadron_pt(trig_jet)

      if self.debug_level > 1:
        pdebug('{}: trigger jet {} (corrected pt {:.3f}, leading hadron pt {:.3f})'.format(
          jet_cont.name, trig_jet, trig_jet_pt, leading_hadron_pt))

      for cell in self.threshold_grid:
        outcome = dijet_selection.select_dijet(jet_cont, trig_jet, trig_jet_pt, cell,
                                               self.delta_phi_min, leading_hadron_pt)
        if outcome is not None:
          self.fill_dijet_histograms(jet_cont.name, cell, outcome)

    return True

  #---------------------------------------------------------------
  # Fill the dijet histograms of one grid cell
  #---------------------------------------------------------------
  def fill_dijet_histograms(self, groupname, cell, outcome):

    hm = self.hist_manager
    cent = self.cent_bin

    if isinstance(outcome, dijet_selection.DijetPair):
      hm.fill_th1(HistKey(groupname, 'histDijetLeadingJetPt', cent, cell), outcome.trig_jet_pt)
      hm.fill_th1(HistKey(groupname, 'histDijetLeadingJetPtuncorr', cent, cell), outcome.trig_jet.pt)
      hm.fill_th1(HistKey(groupname, 'histDijetLeadingJetPhi', cent, cell), outcome.trig_jet.phi)
      hm.fill_th1(HistKey(groupname, 'histDijetSubleadingJetPt', cent, cell), outcome.ass_jet_pt)
      hm.fill_th1(HistKey(groupname, 'histDijetSubleadingJetPhi', cent, cell), outcome.ass_jet.phi)
      hm.fill_th1(HistKey(groupname, 'histDijetAJ', cent, cell), outcome.aj)
      hm.fill_th1(HistKey(groupname, 'histDijetxJ', cent, cell), outcome.xj)
      hm.fill_th1(HistKey(groupname, 'histDijetDeltaPhi', cent, cell), outcome.delta_phi)
    else:
      hm.fill_th1(HistKey(groupname, 'histUnmatchedLeadingJetPt', cent, cell), outcome.trig_jet_pt)
      if outcome.subleading_jet is not None:
        hm.fill_th1(HistKey(groupname, 'histUnmatchedSubleadingJetPt', cent, cell), outcome.subleading_jet_pt)

  #---------------------------------------------------------------
  # Fill QA histograms
  #---------------------------------------------------------------
  def fill_histograms(self, event):

    self.do_jet_loop()
    self.do_track_loop()
    self.do_cluster_loop()
    self.do_cell_loop()

  #---------------------------------------------------------------
  # Loop over accepted jets of each jet container
  #---------------------------------------------------------------
  def do_jet_loop(self):

    hm = self.hist_manager
    cent = self.cent_bin
    for jet_cont in self.jet_containers:

      groupname = jet_cont.name
      count = 0
      for jet in jet_cont.accepted():
        count += 1
        hm.fill_th1(HistKey(groupname, 'histJetPt', cent), jet.pt)
        hm.fill_th1(HistKey(groupname, 'histJetArea', cent), jet.area)
        hm.fill_th1(HistKey(groupname, 'histJetPhi', cent), jet.phi)
        hm.fill_th1(HistKey(groupname, 'histJetEta', cent), jet.eta)
        hm.fill_th2(HistKey(groupname, 'histJetEtaPhi', cent), jet.eta, jet.phi)
        if jet_cont.has_rho():
          hm.fill_th1(HistKey(groupname, 'histJetCorrPt', cent), jet_cont.corrected_pt(jet))

      hm.fill_th1(HistKey(groupname, 'histNJets', cent), count)
      if jet_cont.has_rho():
        hm.fill_th1(HistKey(groupname, 'histJetRho', cent), jet_cont.rho_val())

  #---------------------------------------------------------------
  # Loop over accepted particles of each particle container
  #---------------------------------------------------------------
  def do_track_loop(self):

    hm = self.hist_manager
    cent = self.cent_bin
    clus_cont = self.cluster_containers[0] if self.cluster_containers else None
    for part_cont in self.particle_containers:

      groupname = part_cont.name
      count = 0
      for track in part_cont.accepted():
        count += 1
        hm.fill_th1(HistKey(groupname, 'histTrackPt', cent), track.pt)
        hm.fill_th1(HistKey(groupname, 'histTrackPhi', cent), track.phi)
        hm.fill_th1(HistKey(groupname, 'histTrackEta', cent), track.eta)

        if not part_cont.is_track:
          continue
        hm.fill_th2(HistKey(groupname, 'fHistDeltaEtaPt', cent), track.pt, track.eta - track.eta_emcal)
        hm.fill_th2(HistKey(groupname, 'fHistDeltaPhiPt', cent), track.pt, track.phi - track.phi_emcal)
        hm.fill_th2(HistKey(groupname, 'fHistDeltaPtvsPt', cent), track.pt, track.pt - track.pt_emcal)

        if clus_cont is not None and track.emcal_cluster >= 0 and track.p > 0:
          cluster = clus_cont.accepted_at(track.emcal_cluster)
          if cluster is not None:
            hm.fill_th2(HistKey(groupname, 'fHistEoverPvsP', cent), track.p, cluster.nonlin_corr_energy / track.p)

      hm.fill_th1(HistKey(groupname, 'histNTracks', cent), count)

  #---------------------------------------------------------------
  # Loop over clusters of each cluster container: exotic clusters
  # among all clusters, everything else among accepted clusters
  #---------------------------------------------------------------
  def do_cluster_loop(self):

    hm = self.hist_manager
    cent = self.cent_bin
    for clus_cont in self.cluster_containers:

      groupname = clus_cont.name
      for cluster in clus_cont.all():
        if cluster.is_exotic:
          hm.fill_th1(HistKey(groupname, 'histEMCalClusterEnergyExotic', cent), cluster.energy)

      count = 0
      count_emcal = 0
      count_phos = 0
      for cluster in clus_cont.accepted():
        count += 1
        phi = self.utils.phi_0_2pi(cluster.phi)
        hm.fill_th1(HistKey(groupname, 'histClusterEnergy', cent), cluster.energy)
        hm.fill_th2(HistKey(groupname, 'histClusterEtaPhi', cent), cluster.eta, phi)

        if cluster.is_emcal:
          count_emcal += 1
          hm.fill_th1(HistKey(groupname, 'histEMCalClusterEnergy', cent), cluster.energy)
          hm.fill_th1(HistKey(groupname, 'histEMCalClusterNonLinCorrEnergy', cent), cluster.nonlin_corr_energy)
          hm.fill_th1(HistKey(groupname, 'histEMCalClusterHadCorrEnergy', cent), cluster.had_corr_energy)
          hm.fill_th1(HistKey(groupname, 'histEMCalClusterPhi', cent), phi)
          hm.fill_th1(HistKey(groupname, 'histEMCalClusterEta', cent), cluster.eta)
        elif cluster.is_phos:
          count_phos += 1
          hm.fill_th1(HistKey(groupname, 'histPHOSClusterEnergy', cent), cluster.energy)
          hm.fill_th1(HistKey(groupname, 'histPHOSClusterPhi', cent), phi)
          hm.fill_th1(HistKey(groupname, 'histPHOSClusterEta', cent), cluster.eta)

      hm.fill_th1(HistKey(groupname, 'histNClusters', cent), count)
      hm.fill_th1(HistKey(groupname, 'histEMCalNClusters', cent), count_emcal)
      hm.fill_th1(HistKey(groupname, 'histPHOSNClusters', cent), count_phos)

  #---------------------------------------------------------------
  # Loop over EMCal cells, if available
  #---------------------------------------------------------------
  def do_cell_loop(self):

    if self.calo_cells is None:
      return

    hm = self.hist_manager
    cent = self.cent_bin
    groupname = self.calo_cells_name
    ncells = self.calo_cells.get_number_of_cells()
    hm.fill_th1(HistKey(groupname, 'histNCells', cent), ncells)
    if ncells > 0:
      hm.fill_th2(HistKey(groupname, 'histCellEnergyvsAbsId', cent),
                  self.calo_cells.cell_numbers, self.calo_cells.amplitudes)
