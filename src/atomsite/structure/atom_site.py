"""Conversion of a structure hierarchy into _atom_site records.

    ATOM 7    C CD  . GLU A 1 24  ? -10.109 15.374 38.853 1.00 50.05 24  GLU A CD  1
    ATOM 8    O OE1 . GLU A 1 24  ? -9.659  14.764 37.849 1.00 49.80 24  GLU A OE1 1
"""

import concurrent.futures
import logging
import os.path
from collections import namedtuple

from .mmciffile import (
    MMCIF_DEFAULT_VALUE,
    MMCIF_MISSING_VALUE,
    LoopSchema,
    to_mmcif,
    write_file,
)

logger = logging.getLogger(__name__)

ATOM_SITE_FIELDS = (
    "group_PDB",
    "id",
    "type_symbol",
    "label_atom_id",
    "label_alt_id",
    "label_comp_id",
    "label_asym_id",
    "label_entity_id",
    "label_seq_id",
    "pdbx_PDB_ins_code",
    "Cartn_x",
    "Cartn_y",
    "Cartn_z",
    "occupancy",
    "B_iso_or_equiv",
    "auth_seq_id",
    "auth_comp_id",
    "auth_asym_id",
    "auth_atom_id",
    "pdbx_PDB_model_num",
)

AtomSite = namedtuple("AtomSite", ATOM_SITE_FIELDS)

ATOM_SITE_SCHEMA = LoopSchema("atom_site", AtomSite._fields)

# Pseudo-element of unknown/dummy atoms and the symbol it is written as
PSEUDO_ELEMENT = "R"
PSEUDO_ELEMENT_SYMBOL = "X"

# entity id written for chains without an entity
NO_ENTITY_ID = "0"

COORDINATE_DECIMALS = 3
OCCUPANCY_DECIMALS = 2


def render_optional(value, default=MMCIF_MISSING_VALUE):
    """Render a possibly absent value; None and blank strings give ``default``."""
    if value is None:
        return default
    if isinstance(value, str) and not value.strip():
        return default
    return str(value)


def _format_float(value, decimals, field):
    if value is None:
        return MMCIF_MISSING_VALUE
    try:
        return "{:.{}f}".format(float(value), decimals)
    except (TypeError, ValueError):
        logger.warning(f"Could not format value {value!r} of field {field} as a number")
        return MMCIF_MISSING_VALUE


def _type_symbol(element):
    if element is None or not str(element).strip():
        return MMCIF_MISSING_VALUE
    symbol = str(element).strip().upper()
    if symbol == PSEUDO_ELEMENT:
        return PSEUDO_ELEMENT_SYMBOL
    return symbol


def atom_to_atom_site(atom, model_num, chain_id, internal_chain_id):
    """Convert an atom to an AtomSite record.

    Args:
        atom (Atom): atom to convert; its parent residue and chain provide
            the residue and entity information.
        model_num (int): 1-based model number.
        chain_id (str): author chain id (auth_asym_id).
        internal_chain_id (str): label chain id (label_asym_id).

    Returns:
        AtomSite: a record with every field set.
    """
    residue = atom.parent
    chain = residue.chain

    record = "HETATM" if residue.is_hetatm else "ATOM"

    entity_id = NO_ENTITY_ID
    label_seq_id = residue.resi
    if chain is not None and chain.entity is not None:
        entity_id = chain.entity.mol_id
        label_seq_id = chain.entity.aligned_res_index(residue, chain)

    return AtomSite(
        group_PDB=record,
        id=render_optional(atom.serial),
        type_symbol=_type_symbol(atom.element),
        label_atom_id=render_optional(atom.name),
        label_alt_id=render_optional(atom.altloc, default=MMCIF_DEFAULT_VALUE),
        label_comp_id=render_optional(residue.resn),
        label_asym_id=render_optional(internal_chain_id),
        label_entity_id=render_optional(entity_id),
        label_seq_id=render_optional(label_seq_id),
        pdbx_PDB_ins_code=render_optional(residue.icode),
        Cartn_x=_format_float(atom.x, COORDINATE_DECIMALS, "Cartn_x"),
        Cartn_y=_format_float(atom.y, COORDINATE_DECIMALS, "Cartn_y"),
        Cartn_z=_format_float(atom.z, COORDINATE_DECIMALS, "Cartn_z"),
        occupancy=_format_float(atom.occupancy, OCCUPANCY_DECIMALS, "occupancy"),
        B_iso_or_equiv=_format_float(atom.bfactor, OCCUPANCY_DECIMALS, "B_iso_or_equiv"),
        auth_seq_id=render_optional(residue.resi),
        auth_comp_id=render_optional(residue.resn),
        auth_asym_id=render_optional(chain_id),
        auth_atom_id=render_optional(atom.name),
        pdbx_PDB_model_num=str(model_num),
    )


def residue_to_atom_sites(residue, model_num, chain_id, internal_chain_id):
    """Records for the atoms of a residue followed by its alternate locations."""
    atom_sites = []
    visited = set()
    # depth first; siblings are pushed in reverse to keep their stored order
    worklist = [residue]
    while worklist:
        group = worklist.pop()
        if id(group) in visited:
            logger.warning(f"{group} was already written, skipping alternate location cycle")
            continue
        visited.add(id(group))

        for atom in group.atoms:
            if atom is None:
                continue
            atom_sites.append(
                atom_to_atom_site(atom, model_num, chain_id, internal_chain_id)
            )
        worklist.extend(reversed(group.altlocs))
    return atom_sites


def chain_to_atom_sites(chain, model_num, chain_id, internal_chain_id):
    if chain.entity is None:
        logger.warning(
            f"No entity found for chain {chain.chain_id}: entity_id will be set "
            f"to {NO_ENTITY_ID}, label_seq_id will be the same as auth_seq_id"
        )
    atom_sites = []
    for residue in chain.residues:
        atom_sites.extend(
            residue_to_atom_sites(residue, model_num, chain_id, internal_chain_id)
        )
    return atom_sites


def model_to_atom_sites(model, model_num, nproc=1):
    """Records of all chains of a model, in stored chain order.

    With nproc > 1 the chains are mapped on a thread pool; the records are
    still gathered in chain order.
    """
    def _chain_atom_sites(chain):
        return chain_to_atom_sites(chain, model_num, chain.chain_id, chain.internal_id)

    if nproc > 1 and len(model.chains) > 1:
        with concurrent.futures.ThreadPoolExecutor(max_workers=nproc) as executor:
            chain_sites = list(executor.map(_chain_atom_sites, model.chains))
    else:
        chain_sites = [_chain_atom_sites(chain) for chain in model.chains]

    atom_sites = []
    for sites in chain_sites:
        atom_sites.extend(sites)
    return atom_sites


def structure_to_atom_sites(structure, nproc=1):
    """Convert a structure into AtomSite records, models numbered from 1."""
    atom_sites = []
    for model_num, model in enumerate(structure.models, start=1):
        atom_sites.extend(model_to_atom_sites(model, model_num, nproc=nproc))
    return atom_sites


def atom_site_loop(structure, nproc=1):
    return to_mmcif(ATOM_SITE_SCHEMA, structure_to_atom_sites(structure, nproc=nproc))


def default_block_name(structure, fname=None):
    if structure.name:
        return structure.name
    if fname is not None:
        return os.path.basename(fname).split(".")[0]
    return "atomsite"


def write_mmcif(fname, structure, block_name=None, nproc=1):
    """Write the atom_site loop of a structure to an mmCIF file.

    Parameters
    ----------
    fname : str
        Filename to write to; .gz names are compressed.
    structure : Structure
        Structure to convert.
    block_name : str, optional
        Data block code, by default the structure name or the file stem.
    nproc : int
        Number of threads used to map chains.
    """
    if block_name is None:
        block_name = default_block_name(structure, fname)
    loop = atom_site_loop(structure, nproc=nproc)
    write_file(fname, block_name, [loop])
