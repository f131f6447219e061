from .differ import diff
from .differences import Category, DiffResult, Difference
from .errors import NotFoundError
from .model import Row, Section, SectionKind
from .parser import parse, read_config

__version__ = '0.1.0'

__all__ = [
    'Category',
    'DiffResult',
    'Difference',
    'NotFoundError',
    'Row',
    'Section',
    'SectionKind',
    'diff',
    'parse',
    'read_config',
]
