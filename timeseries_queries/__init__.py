from .reader import *
