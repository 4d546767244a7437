import math

import pytest

from pydijet.alice_analysis.process.base.emcal_containers import (Jet, Particle, Cluster, CaloCells,
                                                                  JetContainer, ParticleContainer,
                                                                  ClusterContainer)
from pydijet.alice_analysis.process.base.process_utils import ProcessUtils

from conftest import jet_container


def test_jet_acceptance():
  jets = [Jet(pt=5., eta=0.1, phi=1., area=0.2),
          Jet(pt=25., eta=0.8, phi=1., area=0.2),
          Jet(pt=25., eta=0.1, phi=1., area=0.01),
          Jet(pt=25., eta=0.1, phi=1., area=0.2)]
  jet_cont = jet_container(jets, pt_min=10., eta_min=-0.5, eta_max=0.5, area_min=0.05)

  assert len(jet_cont) == 4
  assert jet_cont.all() == jets
  assert jet_cont.accepted() == [jets[3]]


def test_leading_jet():
  jets = [Jet(pt=30.), Jet(pt=40.), Jet(pt=40.), Jet(pt=10.)]
  assert jet_container(jets).leading_jet() is jets[1]
  assert jet_container([]).leading_jet() is None


def test_rho_correction():
  jet = Jet(pt=40., area=0.5)

  jet_cont = jet_container([jet], rho=10.)
  assert jet_cont.has_rho()
  assert jet_cont.corrected_pt(jet) == pytest.approx(35.)

  # no rho configured: a value given for the event is ignored
  jet_cont = JetContainer(name='jets')
  jet_cont.set_entries([jet])
  jet_cont.set_rho(10.)
  assert not jet_cont.has_rho()
  assert jet_cont.rho_val() == 0.
  assert jet_cont.corrected_pt(jet) == 40.


def test_leading_hadron_type():
  jet = Jet(pt=40., max_track_pt=3., max_cluster_pt=7.)

  assert JetContainer(name='jets').leading_hadron_pt(jet) == 3.
  assert JetContainer(name='jets', leading_hadron_type=JetContainer.kNeutral).leading_hadron_pt(jet) == 7.
  assert JetContainer(name='jets', leading_hadron_type=JetContainer.kBoth).leading_hadron_pt(jet) == 7.
  with pytest.raises(ValueError):
    JetContainer(name='jets', leading_hadron_type=3)


def test_particle_defaults():
  track = Particle(pt=2., eta=0.5)
  assert track.p == pytest.approx(2. * math.cosh(0.5))
  assert track.emcal_cluster == -1

  part_cont = ParticleContainer(name='tracks', is_track=True, pt_min=1.)
  part_cont.set_entries([track, Particle(pt=0.5)])
  assert part_cont.accepted() == [track]


def test_cluster_container():
  clusters = [Cluster(energy=2.), Cluster(energy=0.1), Cluster(energy=5., is_exotic=True)]

  clus_cont = ClusterContainer(name='caloClusters', e_min=0.3)
  clus_cont.set_entries(clusters)
  assert clus_cont.accepted() == [clusters[0]]
  assert clus_cont.accepted_at(0) is clusters[0]
  assert clus_cont.accepted_at(1) is None
  assert clus_cont.accepted_at(2) is None
  assert clus_cont.accepted_at(3) is None
  assert clus_cont.accepted_at(-1) is None

  clus_cont = ClusterContainer(name='caloClusters', exclude_exotic=False)
  clus_cont.set_entries(clusters)
  assert len(clus_cont.accepted()) == 3


def test_cluster_energy_defaults():
  cluster = Cluster(energy=3.)
  assert cluster.nonlin_corr_energy == 3.
  assert cluster.had_corr_energy == 3.

  cluster = Cluster(energy=3., nonlin_corr_energy=2.5)
  assert cluster.had_corr_energy == 2.5


def test_calo_cells():
  cells = CaloCells(cell_numbers=[1, 5, 9], amplitudes=[0.1, 0.2, 0.3])
  assert cells.get_number_of_cells() == 3
  assert CaloCells().get_number_of_cells() == 0

  with pytest.raises(ValueError):
    CaloCells(cell_numbers=[1, 2], amplitudes=[0.1])


@pytest.mark.parametrize('centrality, expected', [(0., 0), (9.99, 0), (10., 1), (49., 2), (50., 3),
                                                  (100., 3), (100.5, -1), (-1., -1)])
def test_cent_bin(centrality, expected):
  assert ProcessUtils().cent_bin(centrality, [0., 10., 30., 50., 100.]) == expected


def test_utils():
  utils = ProcessUtils()
  assert utils.is_pp('pp')
  assert not utils.is_pp('PbPb')
  with pytest.raises(ValueError):
    utils.is_pp('XeXe')

  assert utils.phi_0_2pi(-0.5) == pytest.approx(2*math.pi - 0.5)
  assert utils.phi_0_2pi(1.) == pytest.approx(1.)
