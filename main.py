from rich.pretty import pprint

from commandant import *

__prog__ = "reduce"

cmdr = Commander("reduce", "0.0.1", shell=True, colorful=True)
cmdr.add_global(
    Option("-d|--debug", "Debug mode"),
    Option("-c|--config=PATH", "Alternate configuration file", type=OptionType.STRING),
)
cmdr.add("clean", "Clean components", [
    Option(None, "Components to clean", type=OptionType.LIST, required=True, allowed=("all", "iso", "image")),
])
cmdr.add("build", "Build components", [
    Option(None, "Components to build", type=OptionType.LIST, required=True, allowed=("all", "iso", "image")),
    Option("-j|--jobs=N", "Parallel jobs", type=OptionType.INTEGER),
])
cmdr.add("list", "List build components", [
    Command("deps", "List dependencies", [
        Option("-a|--all", "Include transitive dependencies"),
    ]),
])


if __name__ == '__main__':
    pprint(cmdr.parse())
