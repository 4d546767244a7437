#!/usr/bin/env python3

"""
  Base class for all analysis objects: stores keyword arguments
  as attributes and prints them.
"""

################################################################
class CommonBase(object):

  #---------------------------------------------------------------
  # Constructor
  #---------------------------------------------------------------
  def __init__(self, **kwargs):
    for key, value in kwargs.items():
      setattr(self, key, value)

  #---------------------------------------------------------------
  # Print all public attributes (long values are truncated)
  #---------------------------------------------------------------
  def __str__(self):
    s = []
    for key, value in self.__dict__.items():
      if key.startswith('_'):
        continue
      sval = str(value)
      if len(sval) > 500:
        sval = sval[:496] + '...'
      s.append('{} = {}'.format(key, sval))
    return '[i] {} with \n .  {}'.format(self.__class__.__name__, '\n .  '.join(s))
