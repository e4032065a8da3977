"""
Utilities for writing unit and integration tests with small mock
structures.
"""

import unittest
import tempfile
import os


def format_atom_line(record, serial, name, resn, chain, resi, xyz,
                     q=1.0, b=10.0, element="", altloc=" ", icode=" "):
    """Format one fixed-column ATOM/HETATM record."""
    x, y, z = xyz
    return (
        f"{record:<6s}{serial:>5d} {name:<4s}{altloc:1s}{resn:>3s} "
        f"{chain:1s}{resi:>4d}{icode:1s}   {x:>8.3f}{y:>8.3f}{z:>8.3f}"
        f"{q:>6.2f}{b:>6.2f}          {element:>2s}"
    )


SERINE_MULTICONF = """\
CRYST1    6.000    6.000    6.000  90.00  90.00  90.00 P 1
ATOM      1  N  ASER A   1       2.264   2.024   3.928  0.50  8.00           N
ATOM      2  N  BSER A   1       2.267   2.022   3.930  0.50  8.00           N
ATOM      3  CA ASER A   1       3.355   2.711   4.609  0.50  8.00           C
ATOM      4  CA BSER A   1       3.356   2.716   4.606  0.50  8.00           C
ATOM      5  C  ASER A   1       4.708   2.300   4.035  0.50  8.00           C
ATOM      6  C  BSER A   1       4.710   2.299   4.039  0.50  8.00           C
ATOM      7  O  ASER A   1       5.027   1.114   3.962  0.50  8.00           O
ATOM      8  O  BSER A   1       5.023   1.111   3.963  0.50  8.00           O
ATOM      9  CB ASER A   1       3.313   2.425   6.111  0.50  8.00           C
ATOM     10  CB BSER A   1       3.312   2.447   6.111  0.50  8.00           C
ATOM     11  OG ASER A   1       2.144   2.967   6.701  0.50  8.00           O
ATOM     12  OG BSER A   1       4.392   3.079   6.775  0.50  8.00           O
TER
END"""

TRIMER_TEMPLATE = """\
ATOM      1  N   ALA A   1       0.661   1.882   2.716  1.00 20.00           N
ATOM      2  CA  ALA A   1       2.002   1.825   2.146  1.00 20.00           C
ATOM      3  C   ALA A   1       2.974   2.688   2.942  1.00 20.00           C
ATOM      4  O   ALA A   1       2.902   3.916   2.906  1.00 20.00           O
ATOM      5  CB  ALA A   1       1.976   2.260   0.689  1.00 20.00           C
ATOM      6  N   ALA A   2       3.885   2.037   3.661  1.00 20.00           N
ATOM      7  CA  ALA A   2       4.884   2.713   4.476  1.00 20.00           C
ATOM      8  C   ALA A   2       6.272   2.339   3.980  1.00 20.00           C
ATOM      9  O   ALA A   2       6.604   1.152   3.888  1.00 20.00           O
ATOM     10  CB  ALA A   2       4.731   2.347   5.955  1.00 20.00           C
ATOM     12  N   ALA A   3       7.076   3.348   3.662  1.00 20.00           N
ATOM     13  CA  ALA A   3       8.432   3.124   3.174  1.00 20.00           C
ATOM     14  C   ALA A   3       9.458   3.813   4.067  1.00 20.00           C
ATOM     15  O   ALA A   3       9.520   5.041   4.125  1.00 20.00           O
ATOM     16  CB  ALA A   3       8.566   3.610   1.739  1.00 20.00           C
TER
END"""

# Two copies of a Gly-Ala dipeptide plus one water per chain, and a
# single-residue chain C with a different sequence.
DIMER_WITH_WATERS = "\n".join([
    "HEADER    " + "MOCK DIMER".ljust(40) + "01-JAN-00   1MCK",
    format_atom_line("ATOM", 1, " N", "GLY", "A", 1, (1.0, 2.0, 3.0), b=10.0, element="N"),
    format_atom_line("ATOM", 2, " CA", "GLY", "A", 1, (2.0, 2.0, 3.0), b=10.0, element="C"),
    format_atom_line("ATOM", 3, " N", "ALA", "A", 2, (3.0, 2.0, 3.0), b=10.0, element="N"),
    format_atom_line("ATOM", 4, " CA", "ALA", "A", 2, (4.0, 2.0, 3.0), b=10.0, element="C"),
    "TER",
    format_atom_line("ATOM", 5, " N", "GLY", "B", 1, (11.0, 2.0, 3.0), b=20.0, element="N"),
    format_atom_line("ATOM", 6, " CA", "GLY", "B", 1, (12.0, 2.0, 3.0), b=20.0, element="C"),
    format_atom_line("ATOM", 7, " N", "ALA", "B", 2, (13.0, 2.0, 3.0), b=20.0, element="N"),
    format_atom_line("ATOM", 8, " CA", "ALA", "B", 2, (14.0, 2.0, 3.0), b=20.0, element="C"),
    "TER",
    format_atom_line("ATOM", 9, " N", "SER", "C", 5, (21.0, 2.0, 3.0), b=30.0, element="N"),
    "TER",
    format_atom_line("HETATM", 10, " O", "HOH", "A", 101, (5.0, 5.0, 5.0), b=30.0, element="O"),
    format_atom_line("HETATM", 11, " O", "HOH", "B", 101, (15.0, 5.0, 5.0), b=30.0, element="O"),
    "END",
])

# Two NMR-style models of a single glycine.
GLYCINE_TWO_MODELS = "\n".join([
    "MODEL        1",
    format_atom_line("ATOM", 1, " N", "GLY", "A", 1, (1.0, 2.0, 3.0), element="N"),
    format_atom_line("ATOM", 2, " CA", "GLY", "A", 1, (2.0, 2.0, 3.0), element="C"),
    "ENDMDL",
    "MODEL        2",
    format_atom_line("ATOM", 1, " N", "GLY", "A", 1, (1.5, 2.5, 3.5), element="N"),
    format_atom_line("ATOM", 2, " CA", "GLY", "A", 1, (2.5, 2.5, 3.5), element="C"),
    "ENDMDL",
    "END",
])

# Insertion code, an atom without element column and a dummy atom.
INSERTION_AND_DUMMY = "\n".join([
    format_atom_line("ATOM", 1, " N", "GLY", "A", 52, (1.0, 2.0, 3.0), element="N"),
    format_atom_line("ATOM", 2, " N", "GLY", "A", 52, (2.0, 2.0, 3.0), element="N", icode="A"),
    format_atom_line("ATOM", 3, " CA", "GLY", "A", 52, (3.0, 2.0, 3.0), element="", icode="A"),
    format_atom_line("HETATM", 4, " DUM", "UNL", "A", 201, (4.0, 4.0, 4.0), element="X"),
    "END",
])


class BaseTestRunner(unittest.TestCase):

    def setUp(self):
        tmp_dir = tempfile.mkdtemp("atomsite")
        print(f"TMP={tmp_dir}")
        self._cwd = os.getcwd()
        os.chdir(tmp_dir)

    def tearDown(self):
        os.chdir(self._cwd)

    def _write_tmp_pdb(self, pdb_str, suffix=""):
        pdb_tmp = tempfile.NamedTemporaryFile(suffix=f"{suffix}.pdb").name
        with open(pdb_tmp, "wt", encoding="ascii") as pdb_out:
            pdb_out.write(pdb_str)
        return pdb_tmp

    def _get_serine_multiconf_pdb(self):
        return self._write_tmp_pdb(SERINE_MULTICONF, "-ser-multi")

    def _get_trimer_pdb(self):
        return self._write_tmp_pdb(TRIMER_TEMPLATE, "-ala3")

    def _get_dimer_pdb(self):
        return self._write_tmp_pdb(DIMER_WITH_WATERS, "-dimer")

    def _get_two_model_pdb(self):
        return self._write_tmp_pdb(GLYCINE_TWO_MODELS, "-nmr")

    def _get_insertion_pdb(self):
        return self._write_tmp_pdb(INSERTION_AND_DUMMY, "-icode")
