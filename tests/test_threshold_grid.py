import pytest

from pydijet.alice_analysis.process.base.threshold_grid import ThresholdGrid


def test_default_grid():
  grid = ThresholdGrid()

  assert len(grid) == 32
  cells = list(grid)
  assert [(c.k, c.i, c.j) for c in cells[:5]] == [(0, 0, 0), (0, 0, 1), (0, 0, 2), (0, 0, 3), (0, 1, 0)]
  assert (cells[-1].k, cells[-1].i, cells[-1].j) == (1, 3, 3)
  assert len(set(c.label for c in cells)) == 32


def test_cell_thresholds():
  grid = ThresholdGrid()

  cell = grid.cell(1, 2, 3)
  assert cell.label == '_had1_trig2_ass3'
  assert cell.leading_hadron_cut == 5.
  assert cell.trig_jet_min_pt == 45.
  assert cell.ass_jet_min_pt_frac == 0.6
  assert cell.ass_jet_min_pt == pytest.approx(27.)

  assert grid.cell(0, 0, 0).ass_jet_min_pt == 0.
  assert grid.cell(0, 3, 1).ass_jet_min_pt == pytest.approx(20.)


def test_cell_lookup_matches_iteration_order():
  grid = ThresholdGrid()
  for cell in grid:
    assert grid.cell(cell.k, cell.i, cell.j) is cell

  with pytest.raises(IndexError):
    grid.cell(2, 0, 0)


def test_custom_grid():
  grid = ThresholdGrid(leading_hadron_cuts=[0.], trig_jet_min_pt=[20., 30.], ass_jet_min_pt_frac=[0.5])

  assert len(grid) == 2
  assert [c.ass_jet_min_pt for c in grid] == [10., 15.]

  with pytest.raises(ValueError):
    ThresholdGrid(trig_jet_min_pt=[])


@pytest.mark.parametrize('thresholds', [{'trig_jet_min_pt': [0.]},
                                        {'trig_jet_min_pt': [35., -5.]},
                                        {'ass_jet_min_pt_frac': [-0.1, 0.5]}])
def test_thresholds_must_define_imbalance(thresholds):
  with pytest.raises(ValueError):
    ThresholdGrid(**thresholds)
