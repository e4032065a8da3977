from .hierarchy import Structure, Model, Chain, Residue, Atom, Entity
from .mmciffile import mmCIFError, ShapeMismatchError, EmptyInputError, FieldAccessError
