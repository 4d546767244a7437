import numpy as np
import pytest
import yaml

from pydijet.alice_analysis.process.base.emcal_containers import Jet, JetContainer, EmcalEvent
from pydijet.alice_analysis.process.user.dijet.process_dijet_imbalance import ProcessDijetImbalance

JET_CONT = 'Jet_AKTFullR020_tracks_pT3000_caloClusters_E3000_pt_scheme'
JET_CONT_RHO = 'Jet_AKTChargedR020_tracks_pT0150_pt_scheme'


def base_config(**overrides):
  config = {
    'debug_level': 0,
    'beam_type': 'PbPb',
    'cent_bins': [0., 10., 30., 50., 100.],
    'nbins': 50,
    'min_bin_pt': 0.,
    'max_bin_pt': 250.,
    'delta_phi_min': 2.,
    'jet_containers': [{'name': JET_CONT}],
    'particle_containers': [{'name': 'tracks', 'is_track': True}],
    'cluster_containers': [{'name': 'caloClusters'}],
    'calo_cells_name': 'emcalCells',
  }
  config.update(overrides)
  return config


@pytest.fixture
def make_task(tmp_path):
  """Build a task from a config dict and book its histograms."""
  def _make_task(config=None, output_dir='', book=True):
    config_file = tmp_path / 'config.yaml'
    with open(config_file, 'w') as stream:
      yaml.safe_dump(config if config is not None else base_config(), stream)
    task = ProcessDijetImbalance(config_file=str(config_file), output_dir=output_dir)
    if book:
      task.initialize_output_objects()
    return task
  return _make_task


@pytest.fixture
def record_fills():
  """Record the keys of every fill of a task's histogram registry."""
  def _record_fills(task):
    filled = []
    hm = task.hist_manager
    fill_th1, fill_th2 = hm.fill_th1, hm.fill_th2

    def recording_fill_th1(key, *args, **kwargs):
      filled.append(key)
      fill_th1(key, *args, **kwargs)

    def recording_fill_th2(key, *args, **kwargs):
      filled.append(key)
      fill_th2(key, *args, **kwargs)

    hm.fill_th1 = recording_fill_th1
    hm.fill_th2 = recording_fill_th2
    return filled
  return _record_fills


def dijet_event(trig_pt=60., ass_pt=30., trig_phi=0.2, ass_phi=3.5, centrality=5., max_track_pt=10., **kwargs):
  jets = [Jet(pt=trig_pt, eta=0.1, phi=trig_phi, area=0.12, max_track_pt=max_track_pt),
          Jet(pt=ass_pt, eta=-0.2, phi=ass_phi, area=0.12, max_track_pt=4.)]
  return EmcalEvent(run_number=1, ev_id=1, centrality=centrality, jets={JET_CONT: jets}, **kwargs)


def jet_container(jets, rho=None, **kwargs):
  if rho is not None:
    kwargs.setdefault('rho_name', 'Rho')
  jet_cont = JetContainer(name='jets', **kwargs)
  jet_cont.set_entries(jets)
  jet_cont.set_rho(rho)
  return jet_cont


def random_events(n, seed=1):
  rng = np.random.default_rng(seed)
  events = []
  for ev_id in range(n):
    jets = []
    for _ in range(rng.integers(0, 6)):
      jets.append(Jet(pt=rng.uniform(1., 90.), eta=rng.uniform(-0.5, 0.5), phi=rng.uniform(0., 2*np.pi),
                      area=rng.uniform(0.05, 0.2), max_track_pt=rng.uniform(0., 12.)))
    events.append(EmcalEvent(run_number=1, ev_id=ev_id, centrality=rng.uniform(0., 100.),
                             jets={JET_CONT: jets, JET_CONT_RHO: list(jets)}, rho={'Rho': rng.uniform(0., 40.)}))
  return events
