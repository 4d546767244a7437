import sys


class ColorS(object):
	def str(*args):
		_s = ' '.join([str(s) for s in args])
		return _s
	def green(*s): 
		return '\033[92m{}\033[00m'.format(ColorS.str(*s))
	def yellow(*s): 
		return '\033[93m{}\033[00m'.format(ColorS.str(*s))
	def purple(*s): 
		return '\033[95m{}\033[00m'.format(ColorS.str(*s))

def pwarning(*args, file=sys.stderr):
	print(ColorS.yellow('[w]', *args), file=file)

def pdebug(*args, file=sys.stderr):
	print(ColorS.purple('[d]', *args), file=file)

def pinfo(*args, file=sys.stdout):
	print(ColorS.green('[i]', *args), file=file)
