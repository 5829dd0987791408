from .trigger import *
