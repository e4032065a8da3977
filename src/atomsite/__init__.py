import logging

from .structure import Structure, Model, Chain, Residue, Atom, Entity
from .structure.atom_site import (
    AtomSite,
    ATOM_SITE_SCHEMA,
    atom_to_atom_site,
    structure_to_atom_sites,
    write_mmcif,
)
from .structure.mmciffile import LoopSchema, to_mmcif
from .structure.pdbfile import read_pdb


LOGGER = logging.getLogger(__name__)
