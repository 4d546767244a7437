#!/usr/bin/env python3

"""
  Histogram registry for analysis tasks.

  Histograms are booked once (create_th1 / create_th2) under a structured
  HistKey and then filled every event. The string form of a key,
    <group>/<metric>_<cent>                           (QA histograms)
    <group>/<metric>_<cent>_had<k>_trig<i>_ass<j>     (dijet histograms)
  is the name the histogram is written out with.

  Booking a key twice, or filling a key that was never booked, raises
  HistogramError: either one means the booking and filling code disagree.
"""

import collections

import numpy as np
import hist

# Base class
from pydijet.alice_analysis.process.base import common_base

################################################################
class HistogramError(KeyError):
  pass

################################################################
class HistKey(collections.namedtuple('HistKey', ['group', 'metric', 'cent_bin', 'cell'])):
  __slots__ = ()

  def __new__(cls, group, metric, cent_bin=None, cell=None):
    return super(HistKey, cls).__new__(cls, group, metric, cent_bin, cell)

  #---------------------------------------------------------------
  # Name of the histogram in the output file
  #---------------------------------------------------------------
  def __str__(self):
    name = self.metric
    if self.cent_bin is not None:
      name += '_{}'.format(self.cent_bin)
    if self.cell is not None:
      name += self.cell.label
    if self.group:
      return '{}/{}'.format(self.group, name)
    return name

################################################################
class HistManager(common_base.CommonBase):

  #---------------------------------------------------------------
  # Constructor
  #---------------------------------------------------------------
  def __init__(self, name='', **kwargs):
    super(HistManager, self).__init__(**kwargs)
    self.name = name
    self.groups = []
    self.histograms = {}
    self.entries = {}
    self.names = {}

  #---------------------------------------------------------------
  # Register a group (an output directory). Creating it twice is harmless.
  #---------------------------------------------------------------
  def create_histo_group(self, group):
    if group not in self.groups:
      self.groups.append(group)

  #---------------------------------------------------------------
  # Book a 1D histogram. title follows the ROOT convention
  # "name;x title;y title".
  #---------------------------------------------------------------
  def create_th1(self, key, title, nbins, xmin, xmax):
    xtitle, _ = self.axis_titles(title, 2)
    h = hist.Hist(hist.axis.Regular(nbins, xmin, xmax, name='x', label=xtitle),
                  name=str(key), label=title)
    return self.add(key, h)

  #---------------------------------------------------------------
  # Book a 2D histogram
  #---------------------------------------------------------------
  def create_th2(self, key, title, nbinsx, xmin, xmax, nbinsy, ymin, ymax):
    xtitle, ytitle, _ = self.axis_titles(title, 3)
    h = hist.Hist(hist.axis.Regular(nbinsx, xmin, xmax, name='x', label=xtitle),
                  hist.axis.Regular(nbinsy, ymin, ymax, name='y', label=ytitle),
                  name=str(key), label=title)
    return self.add(key, h)

  #---------------------------------------------------------------
  # Split "name;x;y" into the axis titles (padded with '')
  #---------------------------------------------------------------
  def axis_titles(self, title, n):
    parts = title.split(';')[1:]
    parts += [''] * (n - len(parts))
    return parts[:n]

  #---------------------------------------------------------------
  # Store a booked histogram
  #---------------------------------------------------------------
  def add(self, key, h):

    if not isinstance(key, HistKey):
      raise TypeError('HistManager: expected a HistKey, got {!r}'.format(key))

    name = str(key)
    if key in self.histograms or name in self.names:
      raise HistogramError('HistManager {}: histogram {} already exists'.format(self.name, name))
    if key.group:
      self.create_histo_group(key.group)

    self.histograms[key] = h
    self.entries[key] = 0
    self.names[name] = key
    return h

  #---------------------------------------------------------------
  # Fill a 1D histogram
  #---------------------------------------------------------------
  def fill_th1(self, key, x, weight=1.):
    key = self.resolve_key(key)
    h = self.find_object(key)
    h.fill(x, weight=weight)
    self.entries[key] += np.size(x)

  #---------------------------------------------------------------
  # Fill a 2D histogram
  #---------------------------------------------------------------
  def fill_th2(self, key, x, y, weight=1.):
    key = self.resolve_key(key)
    h = self.find_object(key)
    h.fill(x, y, weight=weight)
    self.entries[key] += np.size(x)

  #---------------------------------------------------------------
  # Map the string form of a key back to its HistKey
  #---------------------------------------------------------------
  def resolve_key(self, key):
    if isinstance(key, HistKey):
      return key
    return self.names.get(key, key)

  #---------------------------------------------------------------
  # Return the histogram for a key (HistKey or its string form)
  #---------------------------------------------------------------
  def find_object(self, key):
    key = self.resolve_key(key)
    try:
      return self.histograms[key]
    except KeyError:
      raise HistogramError('HistManager {}: histogram {} was never created'.format(self.name, key)) from None

  #---------------------------------------------------------------
  # Number of entries (filled values) for a key
  #---------------------------------------------------------------
  def get_entries(self, key):
    key = self.resolve_key(key)
    self.find_object(key)
    return self.entries[key]

  #---------------------------------------------------------------
  # Add the contents of another registry with an identical key set,
  # e.g. one filled by another worker
  #---------------------------------------------------------------
  def merge(self, other):

    if set(self.histograms) != set(other.histograms):
      missing = set(self.histograms).symmetric_difference(other.histograms)
      raise HistogramError('HistManager {}: cannot merge, {} keys differ (e.g. {})'.format(
        self.name, len(missing), next(iter(missing))))

    for key, h in self.histograms.items():
      h_other = other.histograms[key]
      if h.ndim != h_other.ndim or not all(np.array_equal(a.edges, b.edges) for a, b in zip(h.axes, h_other.axes)):
        raise HistogramError('HistManager {}: binning of {} differs'.format(self.name, key))
      h += h_other
      self.entries[key] += other.entries[key]

  def keys(self):
    return list(self.histograms.keys())

  def items(self):
    return self.histograms.items()

  def __contains__(self, key):
    if isinstance(key, HistKey):
      return key in self.histograms
    return key in self.names

  def __len__(self):
    return len(self.histograms)

  def __iter__(self):
    return iter(self.histograms)
