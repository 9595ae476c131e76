from .array import LazyVector
