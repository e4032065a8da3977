"""
Unit tests for the command line option parsing
"""

import pytest

from atomsite.command_line.structure_to_cif import build_argparser
from atomsite.custom_argparsers import ToggleActionFlag
from atomsite.options import AtomSiteOptions

from .base_test_case import UnitBase


class TestArgparser(UnitBase):
    def _parse(self, *args):
        with open("model.pdb", "w") as f:
            f.write("END\n")
        return build_argparser().parse_args(["model.pdb", *args])

    def test_entities_toggle(self):
        assert self._parse().entities is True
        assert self._parse("--no-entities").entities is False
        assert self._parse("--no-entities", "--entities").entities is True

    def test_help_shows_toggle(self):
        help_text = build_argparser().format_help()
        assert "--[no-]entities" in help_text
        assert "--no-entities" not in help_text

    def test_toggle_needs_long_option(self):
        p = build_argparser()
        with pytest.raises(ValueError):
            p.add_argument("-x", action=ToggleActionFlag)

    def test_options_from_args(self):
        args = self._parse("-n", "4", "-b", "1ABC")
        options = AtomSiteOptions().apply_command_args(args)
        assert options.nproc == 4
        assert options.block_name == "1ABC"
        assert options.structure == "model.pdb"
