from rich.pretty import pprint

from optscan import *

__prog__ = "optscan-demo"


if __name__ == '__main__':
    parser = Parser("vho:a", [
        ("id", True),
        ("name", True),
        ("verbose", False, "v"),
        ("output", True, "o"),
    ], shell=True)
    pprint({"options": parser.options(), "arguments": parser.arguments()})
    parser.report()
