import gzip
import logging

from molmass.elements import ELEMENTS

from .hierarchy import (
    ATOM_RECORD,
    HETATM_RECORD,
    Atom,
    Chain,
    Entity,
    Model,
    Residue,
    Structure,
)

__all__ = ["read_pdb", "parse_pdb_lines", "assign_entities", "AtomRecord"]
logger = logging.getLogger(__name__)

UNKNOWN_ELEMENT = "R"


class RecordParser:
    """
    Interface class to provide record parsing routines for a PDB file. It is
    a generic fixed-column-width parser.

    Deriving classes should have class variables for {fields, columns, dtypes}.
    """
    fields = tuple()
    columns = tuple()
    dtypes = tuple()

    # prevent assigning additional attributes
    __slots__ = []

    @classmethod
    def parse_line(cls, line):
        """Common interface for parsing a record from a PDB file.

        Args:
            line (str): A record, as read from a PDB file.

        Returns:
            dict[str, Union[str, int, float]]: fields that were parsed
                from the record.
        """
        values = {}
        for field, column, dtype in zip(cls.fields, cls.columns, cls.dtypes):
            try:
                values[field] = dtype(line[slice(*column)].strip())
            except ValueError:
                logger.error(
                    f"RecordParser.parse_line: could not parse "
                    f"{field} ({line[slice(*column)]}) as {dtype}"
                )
                values[field] = dtype()
        return values


class AtomRecord(RecordParser):
    # http://www.wwpdb.org/documentation/file-format-content/format33/sect9.html#ATOM
    fields = (
        "record",
        "atomid",
        "name",
        "altloc",
        "resn",
        "chain",
        "resi",
        "icode",
        "x",
        "y",
        "z",
        "q",
        "b",
        "e",
        "charge",
    )
    columns = (
        (0, 6),
        (6, 11),
        (12, 16),
        (16, 17),
        (17, 20),
        (21, 22),
        (22, 26),
        (26, 27),
        (30, 38),
        (38, 46),
        (46, 54),
        (54, 60),
        (60, 66),
        (76, 78),
        (78, 80),
    )
    dtypes = (
        str,
        int,
        str,
        str,
        str,
        str,
        int,
        str,
        float,
        float,
        float,
        float,
        float,
        str,
        str,
    )


def _element_symbol(element, name):
    """Element symbol from the element column, or from the atom name."""
    if not element:
        letters = [c for c in name if c.isalpha()]
        element = letters[0] if letters else ""
    element = element.capitalize()
    if not element:
        logger.warning(f"No element for atom {name}. Using {UNKNOWN_ELEMENT}.")
        return UNKNOWN_ELEMENT
    try:
        ELEMENTS[element]
    except (KeyError, TypeError):
        logger.warning(f"Unknown element {element!r} of atom {name}. Using {UNKNOWN_ELEMENT}.")
        return UNKNOWN_ELEMENT
    return element


class _StructureBuilder:
    """Assembles ATOM/HETATM records into a Structure, model by model."""

    def __init__(self, name=None):
        self.structure = Structure(name=name)
        self.model = None

    def new_model(self):
        self.model = self.structure.add_model(Model())

    def end_model(self):
        self.model = None

    def add_atom(self, values):
        if self.model is None:
            self.new_model()

        chain = self.model.get_chain(values["chain"])
        if chain is None:
            chain = self.model.add_chain(Chain(values["chain"]))

        record = HETATM_RECORD if values["record"] == HETATM_RECORD else ATOM_RECORD
        resid = (values["resi"], values["icode"] or None)
        residue = chain.residues[-1] if chain.residues else None
        if residue is None or residue.id != resid:
            residue = chain.add_residue(
                Residue(values["resn"], values["resi"], icode=values["icode"] or None, record=record)
            )

        altloc = values["altloc"] or None
        group = residue
        if altloc is not None:
            if residue.altloc is None and not residue.has_altloc():
                residue.altloc = altloc
            if altloc != residue.altloc:
                group = residue.get_altloc(altloc)
                if group is None:
                    group = residue.add_altloc(
                        Residue(values["resn"], residue.resi, icode=residue.icode,
                                record=record, altloc=altloc)
                    )

        atom = Atom(
            values["name"],
            _element_symbol(values["e"], values["name"]),
            (values["x"], values["y"], values["z"]),
            occupancy=values["q"],
            bfactor=values["b"],
            serial=values["atomid"],
            altloc=altloc,
        )
        group.add_atom(atom)


def assign_entities(structure):
    """Link chains with identical polymer sequences to a shared Entity.

    Entities are numbered from 1 in order of first appearance. Only ATOM
    residues take part in the sequence; chains without any are left
    without an entity.
    """
    entities = {}
    for model in structure.models:
        for chain in model.chains:
            polymer = [residue for residue in chain.residues if not residue.is_hetatm]
            if not polymer:
                continue
            sequence = tuple(residue.resn for residue in polymer)
            entity = entities.get(sequence)
            if entity is None:
                entity = entities[sequence] = Entity(len(entities) + 1)
                logger.debug(f"New entity {entity.mol_id} for chain {chain.chain_id}")
            entity.add_chain(chain, polymer)
    return list(entities.values())


def parse_pdb_lines(lines, entities=True, name=None):
    """Build a Structure from the ATOM and HETATM records of a PDB file."""
    builder = _StructureBuilder(name=name)
    for line in lines:
        record = line[:6].strip()
        if record == "HEADER" and builder.structure.name is None:
            builder.structure.name = line[62:66].strip() or None
        elif record == "MODEL":
            builder.new_model()
        elif record == "ENDMDL":
            builder.end_model()
        elif record in (ATOM_RECORD, HETATM_RECORD):
            builder.add_atom(AtomRecord.parse_line(line.rstrip("\n")))
    structure = builder.structure
    if entities:
        assign_entities(structure)
    logger.info(f"Read {structure.natoms} atoms in {structure.nmodels} model(s)")
    return structure


def read_pdb(fname, entities=True):
    """Read a (possibly gzipped) PDB file into a Structure."""
    if fname.endswith(".gz"):
        fileobj = gzip.open(fname, "rt")
    else:
        fileobj = open(fname, "r")
    with fileobj as f:
        return parse_pdb_lines(f, entities=entities)
