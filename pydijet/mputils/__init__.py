from .mputils import *
