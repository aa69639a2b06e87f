"""
Commands module behavioral tests (tree nodes, builder validation, help text).

Scope
- Validate Command construction and lookups (options by kind, children, find).
- Validate the tree builder: naming rules, reserved help option, duplicates,
  injected help option and display ordering, no mutation of declared nodes.
- Validate the composed help text layout (usage line, COMMANDS/OPTIONS blocks,
  allowed values, flag rendering, column alignment).

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API plus commandant.builder.build.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from commandant import Command, Option, OptionType, WIDTH
from commandant.builder import HELP, build


def _row(key, text):
    return "    " + key.ljust(WIDTH) + text


class TestCommand(TestCase):
    """Behavioral tests for Command nodes."""

    def testNodesMustBeOptionsOrCommands(self):
        with self.assertRaises(TypeError):
            Command("clean", "", ["--all"])

    def testNameMustBeNonEmptyString(self):
        with self.assertRaises(ValueError):
            Command("", "")
        with self.assertRaises(TypeError):
            Command(None, "")

    def testSingleNodeAccepted(self):
        command = Command("clean", "", Option("--all", ""))
        self.assertEqual(len(command.nodes), 1)

    def testLookups(self):
        positional = Option(None, "")
        flag = Option("-a|--all", "")
        deps = Command("deps", "")
        command = Command("list", "", [flag, deps, positional])
        self.assertEqual(command.positionals, (positional,))
        self.assertEqual(command.named, (flag,))
        self.assertEqual(command.options, (flag, positional))
        self.assertEqual(list(command.children), ["deps"])
        self.assertIs(command.find("--all"), flag)
        self.assertIs(command.find("-a"), flag)
        self.assertIsNone(command.find("--none"))

    def testSymbol(self):
        self.assertEqual(Command("fix-links", "").symbol, "fix_links")

    def testNodesAreReadOnly(self):
        command = Command("clean", "", [Option("--all", "")])
        self.assertIsInstance(command.nodes, tuple)
        with self.assertRaises(AttributeError):
            command.name = "other"  # NOQA: read-only property

    def testHelpEmptyUntilBuilt(self):
        self.assertEqual(Command("clean", "").help, "")


class TestBuilder(TestCase):
    """Behavioral tests for the tree builder."""

    def testHelpInjectedExactlyOnce(self):
        built = build(Command("list", "", [Command("deps", "", [Option("--all", "")])]), app="test")
        self.assertEqual(sum(1 for option in built.options if option is HELP), 1)
        deps = built.children["deps"]
        self.assertEqual(sum(1 for option in deps.options if option is HELP), 1)

    def testDeclaredCommandNotMutated(self):
        declared = Command("clean", "", [Option("--all", "")])
        build(declared, app="test")
        self.assertEqual(len(declared.nodes), 1)
        self.assertEqual(declared.help, "")

    def testReservedHelpRejected(self):
        for key in ("--help", "-h|--hide", "-x|--help"):
            with self.subTest(key=key):
                with self.assertRaises(ValueError):
                    build(Command("clean", "", [Option(key, "")]), app="test")

    def testReservedHelpRejectedInSubCommands(self):
        with self.assertRaises(ValueError):
            build(Command("list", "", [Command("deps", "", [Option("--help", "")])]), app="test")

    def testInvalidNamesRejected(self):
        for name in ("Build", "build2", "build_all", "build all"):
            with self.subTest(name=name):
                with self.assertRaises(ValueError):
                    build(Command(name, ""), app="test")

    def testInvalidSubCommandNameRejected(self):
        with self.assertRaises(ValueError):
            build(Command("list", "", [Command("Deps", "")]), app="test")

    def testDuplicateSubCommandsRejected(self):
        with self.assertRaises(ValueError):
            build(Command("list", "", [Command("deps", ""), Command("deps", "")]), app="test")

    def testDuplicateOptionSpellingsRejected(self):
        with self.assertRaises(ValueError):
            build(Command("clean", "", [Option("-a|--all", ""), Option("-a|--any", "")]), app="test")

    def testDisplayOrdering(self):
        first = Option(None, "first")
        second = Option(None, "second")
        verbose = Option("-v|--verbose", "")
        every = Option("-a|--all", "")
        deps = Command("deps", "")
        built = build(Command("list", "", [verbose, first, deps, every, second]), app="test")
        self.assertEqual(built.positionals, (first, second))
        self.assertEqual([option.key for option in built.named], ["-a|--all", "-h|--help", "-v|--verbose"])
        self.assertIsInstance(built.nodes[-1], Command)


class TestHelp(TestCase):
    """Behavioral tests for composed help text."""

    def testLeafCommandHelp(self):
        built = build(Command("clean", "Clean components", [
            Option(None, "Components", type=OptionType.LIST, required=True, allowed=("iso", "image")),
            Option("-n|--dry-run", "Dry run", type=OptionType.TRUE_FLAG),
        ]), app="test")
        self.assertEqual(built.help, "\n".join((
            "Clean components",
            "",
            "Usage: ./test clean [options]",
            "OPTIONS:",
            _row("clean0", "Components (iso,image): Array, Required"),
            _row("-h|--help", "Print command/options help: Flag(false)"),
            _row("-n|--dry-run", "Dry run: Flag(true)"),
        )))

    def testFlagsRenderedWithDefaults(self):
        built = build(Command("sync", "Sync", [
            Option("-f|--fast", "Go fast", type=OptionType.TRUE_FLAG),
            Option("-s|--slow", "Go slow", type=OptionType.FLAG),
        ]), app="test")
        lines = built.help.splitlines()
        self.assertIn(_row("-f|--fast", "Go fast: Flag(true)"), lines)
        self.assertIn(_row("-s|--slow", "Go slow: Flag(false)"), lines)
        self.assertEqual(lines[-1].index("Go slow"), lines[-3].index("Go fast"))

    def testValueOptionWithHint(self):
        built = build(Command("build", "Build", [
            Option("-j|--jobs=N", "Parallel jobs", type=OptionType.INTEGER, required=True),
        ]), app="test")
        self.assertIn(_row("-j|--jobs=N", "Parallel jobs: Integer, Required"), built.help.splitlines())

    def testCommandsBlockSortedAndHidden(self):
        built = build(Command("list", "List things", [
            Command("pkgs", "List packages"),
            Command("deps", "List dependencies"),
            Command("debug", "Internal", hidden=True),
        ]), app="test")
        lines = built.help.splitlines()
        self.assertIn("Usage: ./test list [commands] [options]", lines)
        start = lines.index("COMMANDS:")
        self.assertEqual(lines[start + 1:start + 4], [
            _row("deps", "List dependencies"),
            _row("pkgs", "List packages"),
            "",
        ])
        self.assertNotIn(_row("debug", "Internal"), lines)
        self.assertEqual(lines[start + 4], "OPTIONS:")

    def testSubCommandUsageShowsHierarchy(self):
        built = build(Command("list", "", [Command("deps", "List dependencies")]), app="test")
        self.assertIn("Usage: ./test list deps [options]", built.children["deps"].help.splitlines())

    def testBannerFirst(self):
        built = build(Command("clean", "Clean"), app="test", banner="test_v1\n" + "-" * 80)
        self.assertTrue(built.help.startswith("test_v1\n" + "-" * 80 + "\nClean\n"))


if __name__ == "__main__":
    unittest.main()
