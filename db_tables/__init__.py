from .covid19 import *
