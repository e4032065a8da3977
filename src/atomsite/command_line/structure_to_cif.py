"""Write the atoms of a PDB file as the _atom_site loop of an mmCIF file."""

import argparse
import logging
import os
import os.path
import sys

from tqdm import tqdm

from atomsite.custom_argparsers import (
    ToggleActionFlag,
    CustomHelpFormatter,
    ValidateStructureFileArgument,
)
from atomsite.logtools import setup_logging, log_run_info
from atomsite.options import AtomSiteOptions
from atomsite.structure.atom_site import (
    ATOM_SITE_SCHEMA,
    default_block_name,
    model_to_atom_sites,
)
from atomsite.structure.mmciffile import to_mmcif, write_file
from atomsite.structure.pdbfile import read_pdb

logger = logging.getLogger(__name__)


def build_argparser():
    p = argparse.ArgumentParser(
        formatter_class=CustomHelpFormatter, description=__doc__
    )
    p.add_argument(
        "structure",
        help="PDB file containing structure (optionally gzipped).",
        type=str,
        action=ValidateStructureFileArgument,
    )

    # Conversion options
    p.add_argument(
        "--entities",
        action=ToggleActionFlag,
        dest="entities",
        default=True,
        help="Group chains with identical sequences into entities",
    )
    p.add_argument(
        "-n",
        "--nproc",
        default=1,
        metavar="<int>",
        type=int,
        help="Number of threads used to convert the chains of a model",
    )

    # Output options
    og = p.add_argument_group("Output options")
    og.add_argument(
        "-o",
        "--output",
        default=None,
        metavar="<file>",
        help="mmCIF file to write, by default <directory>/<structure>.cif. "
        "Names ending in .gz are compressed",
    )
    og.add_argument(
        "-b",
        "--block-name",
        dest="block_name",
        default=None,
        metavar="<str>",
        help="Data block code, by default the PDB id or the file name",
    )
    og.add_argument(
        "-d",
        "--directory",
        default=".",
        metavar="<dir>",
        type=os.path.abspath,
        help="Directory to store results",
    )
    og.add_argument("-v", "--verbose", action="store_true", help="Be verbose")
    og.add_argument(
        "--debug", action="store_true", help="Log as much information as possible"
    )
    return p


def output_filename(options):
    if options.output is not None:
        return options.output
    basename = os.path.basename(options.structure)
    if basename.endswith(".gz"):
        basename = basename[:-3]
    stem = os.path.splitext(basename)[0]
    return os.path.join(options.directory, stem + ".cif")


def convert(options):
    structure = read_pdb(options.structure, entities=options.entities)
    if structure.natoms == 0:
        raise RuntimeError(f"No atoms found in {options.structure}")

    atom_sites = []
    for model_num, model in enumerate(
        tqdm(structure.models, desc="Converting models", unit="model", leave=False),
        start=1,
    ):
        atom_sites.extend(model_to_atom_sites(model, model_num, nproc=options.nproc))
    logger.info(f"Converted {len(atom_sites)} atoms")

    fname = output_filename(options)
    block_name = options.block_name
    if block_name is None:
        block_name = default_block_name(structure, options.structure)
    write_file(fname, block_name, [to_mmcif(ATOM_SITE_SCHEMA, atom_sites)])
    return fname


def main():
    p = build_argparser()
    args = p.parse_args()
    os.makedirs(args.directory, exist_ok=True)
    options = AtomSiteOptions().apply_command_args(args)

    setup_logging(options=options, filename="structure_to_cif.log")
    log_run_info(options, logger)

    try:
        fname = convert(options)
    except RuntimeError as e:
        logger.error(f"Conversion of {options.structure} failed: {e}")
        sys.exit(1)
    logger.info(f"mmCIF file written to {fname}")


if __name__ == "__main__":
    main()
