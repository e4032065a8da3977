"""Minimal structure hierarchy: Structure -> Model -> Chain -> Residue -> Atom.

The atom_site writer only reads from these objects. Residues may carry
alternate-location siblings (``Residue.altlocs``), and chains may be linked
to an ``Entity`` that aligns their residues onto the entity sequence.
"""

import logging

import numpy as np

logger = logging.getLogger(__name__)

ATOM_RECORD = "ATOM"
HETATM_RECORD = "HETATM"


class Atom:
    def __init__(
        self,
        name,
        element,
        coor,
        occupancy=1.0,
        bfactor=0.0,
        serial=None,
        altloc=None,
    ):
        self.name = name
        self.element = element
        self.coor = np.asarray(coor, dtype=np.float64)
        self.occupancy = occupancy
        self.bfactor = bfactor
        self.serial = serial
        self.altloc = altloc
        self.parent = None

    def __repr__(self):
        return f"Atom: {self.name}"

    @property
    def x(self):
        return self.coor[0]

    @property
    def y(self):
        return self.coor[1]

    @property
    def z(self):
        return self.coor[2]


class Residue:
    """A group of atoms at one residue position.

    ``record`` is either "ATOM" or "HETATM". ``altloc`` is the alternate
    location identifier of this conformer (None when the residue has a
    single conformer). Alternate conformers are stored as sibling residues
    in ``altlocs``; they share ``id`` and chain with the primary residue.
    """

    def __init__(self, resn, resi, icode=None, record=ATOM_RECORD, altloc=None):
        self.resn = resn
        self.resi = resi
        self.icode = icode
        self.record = record
        self.altloc = altloc
        self.atoms = []
        self.altlocs = []
        self.chain = None

    def __repr__(self):
        string = "Residue: {}".format(self.resi)
        if self.icode:
            string += ":{}".format(self.icode)
        if self.altloc:
            string += " altloc {}".format(self.altloc)
        return string

    @property
    def id(self):
        return (self.resi, self.icode)

    @property
    def is_hetatm(self):
        return self.record == HETATM_RECORD

    @property
    def natoms(self):
        return sum(1 for atom in self.atoms if atom is not None)

    def add_atom(self, atom):
        atom.parent = self
        self.atoms.append(atom)
        return atom

    def has_altloc(self):
        return len(self.altlocs) > 0

    def add_altloc(self, residue):
        residue.chain = self.chain
        self.altlocs.append(residue)
        return residue

    def get_altloc(self, altloc):
        """Return the sibling conformer with the given alt-loc, or None."""
        for residue in self.altlocs:
            if residue.altloc == altloc:
                return residue
        return None


class Entity:
    """The molecule a set of chains represents.

    Each registered chain carries an alignment of its residues onto the
    entity sequence, looked up with ``aligned_res_index``.
    """

    def __init__(self, mol_id):
        self.mol_id = mol_id
        self.chains = []
        self._alignment = {}

    def __repr__(self):
        return f"Entity: {self.mol_id}"

    def add_chain(self, chain, residues=None):
        """Link ``chain`` to this entity.

        ``residues`` are the chain residues in sequence order; they are
        numbered from 1. Defaults to all residues of the chain.
        """
        if residues is None:
            residues = chain.residues
        chain.entity = self
        self.chains.append(chain)
        self._alignment[chain] = {
            residue.id: index for index, residue in enumerate(residues, start=1)
        }

    def aligned_res_index(self, residue, chain):
        """1-based sequence index of ``residue`` within ``chain``, or None."""
        try:
            alignment = self._alignment[chain]
        except KeyError:
            logger.debug(f"Chain {chain.chain_id} is not aligned to entity {self.mol_id}")
            return None
        return alignment.get(residue.id)


class Chain:
    def __init__(self, chain_id, internal_id=None):
        self.chain_id = chain_id
        self.internal_id = chain_id if internal_id is None else internal_id
        self.residues = []
        self.entity = None

    def __repr__(self):
        return f"Chain: {self.chain_id}"

    def add_residue(self, residue):
        residue.chain = self
        for altloc in residue.altlocs:
            altloc.chain = self
        self.residues.append(residue)
        return residue

    @property
    def natoms(self):
        count = 0
        for residue in self.residues:
            count += residue.natoms
            count += sum(alt.natoms for alt in residue.altlocs)
        return count


class Model:
    def __init__(self, chains=None):
        self.chains = []
        for chain in chains or []:
            self.add_chain(chain)

    def add_chain(self, chain):
        self.chains.append(chain)
        return chain

    def get_chain(self, chain_id):
        for chain in self.chains:
            if chain.chain_id == chain_id:
                return chain
        return None

    @property
    def natoms(self):
        return sum(chain.natoms for chain in self.chains)


class Structure:
    def __init__(self, models=None, name=None):
        self.name = name
        self.models = []
        for model in models or []:
            self.add_model(model)

    def __repr__(self):
        return f"Structure: {self.name} ({self.nmodels} models)"

    def add_model(self, model):
        self.models.append(model)
        return model

    @property
    def nmodels(self):
        return len(self.models)

    @property
    def chains(self):
        """Chains of the first model."""
        if not self.models:
            return []
        return self.models[0].chains

    @property
    def natoms(self):
        return sum(model.natoms for model in self.models)
