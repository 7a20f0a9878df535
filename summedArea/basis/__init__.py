from .source import *
from .prefix_sum import *
