"""
Domain Layer

Pure business logic with no provider dependencies.
Contains schemas, value objects, ports (interfaces) and exceptions.
"""

from .schemas import *
from .value_objects import *
from .ports import *
from .exceptions import *
