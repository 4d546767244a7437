import numpy as np
import pandas
import pytest
import uproot

from pydijet.alice_analysis.process.base.process_io import ProcessIO

from conftest import JET_CONT, base_config


def event_table():
  return pandas.DataFrame({'run_number': [100, 100, 101],
                           'ev_id': [7, 3, 3],
                           'centrality': [5., 45., 120.],
                           'Rho': [12., 30., 8.]})


def jet_table():
  return pandas.DataFrame({'run_number': [100, 100, 100, 101],
                           'ev_id': [7, 7, 3, 3],
                           'pt': [60., 30., 40., 20.],
                           'eta': [0.1, -0.2, 0., 0.3],
                           'phi': [0.2, 3.5, 1., 2.],
                           'area': [0.12, 0.13, 0.1, 0.1],
                           'max_track_pt': [8., 2., 6., 1.]})


def test_build_events():
  io = ProcessIO(rho_names=['Rho', 'RhoMissing'])

  events = io.build_events(event_table(), jet_dfs={JET_CONT: jet_table()})

  # order of the event table is kept
  assert [(ev.run_number, ev.ev_id) for ev in events] == [(100, 7), (100, 3), (101, 3)]
  assert [ev.centrality for ev in events] == [5., 45., 120.]
  assert events[0].rho == {'Rho': 12.}

  jets = events[0].jets[JET_CONT]
  assert [jet.pt for jet in jets] == [60., 30.]
  assert jets[0].max_track_pt == 8.
  # column missing from the table keeps its default
  assert jets[0].max_cluster_pt == 0.
  assert [jet.pt for jet in events[2].jets[JET_CONT]] == [20.]
  assert events[0].cells is None


def test_build_events_missing_objects():
  io = ProcessIO()
  jets = jet_table()
  jets = jets[jets['ev_id'] == 7]

  events = io.build_events(event_table(), jet_dfs={JET_CONT: jets},
                           particle_dfs={'tracks': pandas.DataFrame({'run_number': [101], 'ev_id': [3],
                                                                    'pt': [1.5], 'emcal_cluster': [0]})})

  assert events[1].jets == {JET_CONT: []}
  assert events[0].particles == {'tracks': []}
  track = events[2].particles['tracks'][0]
  assert track.pt == 1.5
  assert track.emcal_cluster == 0
  assert isinstance(track.emcal_cluster, int)


def test_build_events_clusters_and_cells():
  io = ProcessIO(calo_cells_name='emcalCells')
  clusters = pandas.DataFrame({'run_number': [100], 'ev_id': [7], 'energy': [4.],
                               'is_emcal': [True], 'is_phos': [False], 'is_exotic': [True]})
  cells = pandas.DataFrame({'run_number': [100, 100], 'ev_id': [7, 7],
                            'cell_number': [11, 12], 'amplitude': [0.5, 1.5]})

  events = io.build_events(event_table(), cluster_dfs={'caloClusters': clusters}, cell_df=cells)

  cluster = events[0].clusters['caloClusters'][0]
  assert cluster.is_exotic
  assert cluster.nonlin_corr_energy == 4.
  assert list(events[0].cells.cell_numbers) == [11, 12]
  assert np.allclose(events[0].cells.amplitudes, [0.5, 1.5])
  assert events[1].cells.get_number_of_cells() == 0


def test_duplicate_events_exit():
  io = ProcessIO()
  events = pandas.DataFrame({'run_number': [1, 1], 'ev_id': [2, 2], 'centrality': [5., 5.]})

  with pytest.raises(SystemExit):
    io.build_events(events)


def test_build_events_from_dict():
  io = ProcessIO()
  events = io.build_events({'run_number': [1, 1], 'ev_id': [1, 2], 'centrality': [5., 15.]})
  assert [ev.ev_id for ev in events] == [1, 2]


def test_load_data_from_trees(tmp_path, make_task):
  input_file = str(tmp_path / 'trees.root')
  with uproot.recreate(input_file) as f:
    f['PWGHF_TreeCreator/tree_event_char'] = {c: event_table()[c].values for c in event_table().columns}
    f['PWGHF_TreeCreator/' + JET_CONT] = {c: jet_table()[c].values for c in jet_table().columns}

  io = ProcessIO(input_file=input_file, tree_dir='PWGHF_TreeCreator', jet_tree_names=[JET_CONT])
  events = io.load_data()

  assert len(events) == 3
  assert [jet.pt for jet in events[0].jets[JET_CONT]] == [60., 30.]

  # events read from trees run through the task
  task = make_task(base_config())
  task.analyze_events(events)
  assert list(task.hist_manager.find_object(task.event_count_key).values()) == [2., 1.]


def test_load_missing_tree_exits(tmp_path):
  input_file = str(tmp_path / 'trees.root')
  with uproot.recreate(input_file) as f:
    f['tree_event_char'] = {'run_number': np.array([1]), 'ev_id': np.array([1])}

  io = ProcessIO(input_file=input_file, jet_tree_names=['missing'])
  with pytest.raises(SystemExit):
    io.load_data()
