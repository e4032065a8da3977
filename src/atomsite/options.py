class AtomSiteOptions:
    def __init__(self):
        # General options
        self.structure = None
        self.directory = "."
        self.verbose = False
        self.debug = False

        # Output options
        self.output = None
        self.block_name = None

        # Conversion options
        self.entities = True
        self.nproc = 1

    def apply_command_args(self, args):
        for key, value in vars(args).items():
            if hasattr(self, key):
                setattr(self, key, value)
        return self
