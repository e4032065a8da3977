"""Contains custom argparse actions & formatters."""

import argparse
from pathlib import Path


class ToggleActionFlag(argparse.Action):
    """Boolean option with a paired --no- form, e.g. --entities/--no-entities."""

    def __init__(self, option_strings, dest, **kwargs):
        if len(option_strings) != 1 or not option_strings[0].startswith("--"):
            raise ValueError(
                f"{self.__class__.__name__} takes a single long option, got {option_strings}"
            )
        name = option_strings[0][2:]
        super().__init__(["--" + name, "--no-" + name], dest, nargs=0, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        setattr(namespace, self.dest, not option_string.startswith("--no-"))

    def format_usage(self):
        return "--[no-]" + self.option_strings[0][2:]


class CustomHelpFormatter(
    argparse.RawDescriptionHelpFormatter,
    argparse.ArgumentDefaultsHelpFormatter,
):
    """Shows defaults, keeps the description as written, and prints
    toggle options as --[no-]name."""

    def _format_action_invocation(self, action):
        if isinstance(action, ToggleActionFlag):
            return action.format_usage()
        return super()._format_action_invocation(action)


class ValidateStructureFileArgument(argparse.Action):
    """Checks that a valid structure file was provided."""

    extension_choices = set((".pdb", ".ent"))

    def __call__(self, parser, namespace, value, option_string=None):
        fname = Path(value)
        suffix = fname.suffix
        if suffix == ".gz":
            suffix = Path(fname.stem).suffix

        if suffix not in self.extension_choices:
            parser.error(
                f"Provided structure ({value}) is not a supported filetype: "
                f"{sorted(self.extension_choices)} (optionally gzipped)."
            )

        if not fname.is_file():
            parser.error(f"Could not find structure file ({value}).")

        setattr(namespace, self.dest, value)
